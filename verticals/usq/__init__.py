"""USQ Virtua vertical — holdings interpretation for a multi-campus library.

Demonstrates every engine component working together in one domain:
- Row normalization from Virtua column names
- Availability resolution with the USQ status and campus tables
- Hold eligibility under the USQ patron-type/campus matrix
- Serial holdings rendering for purchase history
- Dataclass policy configuration
"""
