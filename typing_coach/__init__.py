"""Typing practice session engine and adaptive curriculum recommender."""

__version__ = "0.1.0"
