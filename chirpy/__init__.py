"""Chirpy: file-backed post and account store with token authentication."""

__version__ = "1.0.0"
