"""Reusable patterns behind the holdings engine.

Each module demonstrates a self-contained pattern that can be adapted to
another library's policy: a rules engine for hold decisions, an item state
table, and dataclass policy configuration.
"""
