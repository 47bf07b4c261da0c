"""Summarize git contributions into review artifacts."""

__version__ = "0.3.0"
