"""Pytest configuration for fieldmap tests."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _mapping_debug_logs(caplog: pytest.LogCaptureFixture) -> None:
    """Capture fieldmap debug logs so failures show discovery decisions."""
    caplog.set_level(logging.DEBUG, logger="fieldmap")
