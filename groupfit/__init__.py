"""Grouped OLS fitting with tidy coefficient tables."""

__version__ = "1.0.0"
