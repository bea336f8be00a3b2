"""Messagely: user directory and direct message backend."""

__version__ = "0.1.0"
