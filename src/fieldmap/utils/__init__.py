"""Shared utilities for fieldmap."""
