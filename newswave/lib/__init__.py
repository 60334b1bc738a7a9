"""Shared helpers: configuration loading and console output."""
