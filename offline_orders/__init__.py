"""Offline order management backend for Cafe24 / ECOUNT store workflows"""

__version__ = "1.0.0"
