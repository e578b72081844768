"""Blessed terminal interface."""
