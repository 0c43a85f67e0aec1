"""
Exceptions raised by the comprehensive review engine.

Only configuration problems are fatal. Lookup failures and unmatched
requirements are expected outcomes and are reported, not raised.
"""


class ConfigurationError(ValueError):
    """A rule file, rule entry or required input column is missing or malformed."""
