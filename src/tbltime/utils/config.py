#!/usr/bin/env python
"""Centralized configuration for tbltime.

Constants shared by the formula parser, the range expander, the filter and
the floor dispatch live here so there is a single source of truth for
keywords, defaults and feature flags.
"""

import os
from datetime import date
from typing import Any, Final

import attrs

# Time-related constants
DEFAULT_TIMEZONE: Final = "UTC"
DEFAULT_INDEX_NAME: Final = "date"
DEFAULT_FLOOR_UNIT: Final = "seconds"

# Anchor day used to lift a time-of-day onto a full timestamp
TIME_OF_DAY_ANCHOR: Final = date(1970, 1, 1)

# Time formula syntax
FORMULA_SEPARATOR: Final = "~"
START_KEYWORD: Final = "start"
END_KEYWORD: Final = "end"
FORMULA_KEYWORDS: Final[frozenset[str]] = frozenset({START_KEYWORD, END_KEYWORD})
FORMULA_QUOTE_CHARS: Final = "'\""

# Characters of a time formula side to show in error messages
TEXT_PREVIEW_LENGTH: Final = 60


def _parse_bool_env(env_var: str, default: bool) -> bool:
    """Parse boolean from environment variable with fallback to default.

    Args:
        env_var: Environment variable name to check
        default: Default value if env var not set

    Returns:
        Boolean value from environment or default
    """
    env_value = os.getenv(env_var)
    if env_value is None:
        return default
    return env_value.lower() in ("true", "1", "yes")


@attrs.define
class FeatureFlags:
    """Process-wide switches for optional code paths.

    Environment variables:
    - TBLTIME_USE_SORTED_SEARCH=true/false
    """

    # Binary search on monotonic index columns instead of a full comparison mask
    USE_SORTED_SEARCH: bool = attrs.field(
        default=True,
        converter=lambda x: _parse_bool_env("TBLTIME_USE_SORTED_SEARCH", x),
    )

    @classmethod
    def update(cls, **kwargs: Any) -> None:
        """Update feature flags.

        Example:
            FeatureFlags.update(USE_SORTED_SEARCH=False)
        """
        for key, value in kwargs.items():
            if hasattr(FEATURE_FLAGS, key):
                setattr(FEATURE_FLAGS, key, value)


FEATURE_FLAGS = FeatureFlags()
