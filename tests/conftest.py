#!/usr/bin/env python
"""Root conftest.py that provides fixtures for the test suite.

This file contains:
1. Sample frames for every supported index class
2. A loguru capture fixture (loguru does not feed pytest's caplog)
3. Restoration of process-wide feature flags between tests
"""

from datetime import date, time

import numpy as np
import pandas as pd
import pytest

from tbltime.utils.config import FEATURE_FLAGS
from tbltime.utils.loguru_setup import logger


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: fast tests without external resources")


@pytest.fixture
def daily_df():
    """One row per day from 2013-01-01 to 2016-12-31, naive datetimes."""
    dates = pd.date_range("2013-01-01", "2016-12-31", freq="D")
    return pd.DataFrame({"date": dates, "value": np.arange(len(dates), dtype=float)})


@pytest.fixture
def fang_df():
    """Two symbols with different first days, stacked one after the other."""
    fb = pd.date_range("2013-01-01", "2016-12-31", freq="D")
    amzn = pd.date_range("2013-06-01", "2016-06-30", freq="D")
    return pd.DataFrame(
        {
            "symbol": ["FB"] * len(fb) + ["AMZN"] * len(amzn),
            "date": fb.append(amzn),
            "adjusted": np.arange(len(fb) + len(amzn), dtype=float),
        }
    )


@pytest.fixture
def date_df():
    """Object column of datetime.date values for 2014."""
    days = pd.date_range("2014-01-01", "2014-12-31", freq="D")
    return pd.DataFrame({"day": [d.date() for d in days], "value": np.arange(len(days))})


@pytest.fixture
def time_df():
    """One row per minute of a day, as datetime.time values."""
    times = [time(h, m) for h in range(24) for m in range(60)]
    return pd.DataFrame({"clock": times, "value": np.arange(len(times))})


@pytest.fixture
def month_df():
    months = pd.period_range("2013-01", "2016-12", freq="M")
    return pd.DataFrame({"month": months, "value": np.arange(len(months))})


@pytest.fixture
def quarter_df():
    quarters = pd.period_range("2013Q1", "2016Q4", freq="Q")
    return pd.DataFrame({"quarter": quarters, "value": np.arange(len(quarters))})


@pytest.fixture
def first_of_2014():
    return date(2014, 1, 1)


@pytest.fixture
def log_capture():
    """Collect loguru messages emitted while the test runs.

    Yields:
        list: ``(level_name, message)`` tuples in emission order
    """
    messages = []
    previous_level = logger.getEffectiveLevel()
    logger.configure_level("DEBUG")
    handler_id = logger.add_sink(lambda m: messages.append((m.record["level"].name, m.record["message"])))
    yield messages
    logger.remove_sink(handler_id)
    logger.configure_level(previous_level)


@pytest.fixture(autouse=True)
def restore_feature_flags():
    """Undo FeatureFlags.update() calls made by a test."""
    saved = FEATURE_FLAGS.USE_SORTED_SEARCH
    yield
    FEATURE_FLAGS.USE_SORTED_SEARCH = saved
