"""Habersin: community news sharing with content admission and moderation."""

__version__ = "0.1.0"
