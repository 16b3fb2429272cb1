"""USQ vertical configuration.

Re-exports the HoldingsConfig from the patterns module, demonstrating how
verticals use the domain config pattern. Environment overrides
(ILS_DEFAULT_CAMPUS, ILS_TITLE_HOLD_MODE, ...) apply on top of the USQ
defaults.
"""

from patterns.domain_config import HoldingsConfig

# Default configuration instance
config = HoldingsConfig.from_env()
