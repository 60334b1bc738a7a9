"""Fetch gateway, proxy server and view state controller."""
