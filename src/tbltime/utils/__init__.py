"""Shared utilities: configuration, logging, errors, periods and time handling."""
