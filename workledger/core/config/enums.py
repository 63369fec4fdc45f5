"""Configuration enums for type-safe settings.

These enums provide type safety and IDE autocomplete for configuration values.
They inherit from str to maintain JSON serialization compatibility.
"""

from enum import Enum


class Environment(str, Enum):
    """Deployment environments.

    Controls environment-specific behavior like logging and CORS defaults.
    """

    LOCAL = "local"
    TEST = "test"
    DEV = "dev"
    PRD = "prd"


class CycleResetMode(str, Enum):
    """Selection predicate used by the billing cycle resetter.

    ON_OR_BEFORE resets every client whose anchor is on or before today.
    ANNIVERSARY resets only clients whose anchor is at least one month old.
    """

    ON_OR_BEFORE = "on_or_before"
    ANNIVERSARY = "anniversary"
