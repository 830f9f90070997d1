"""Squadcast provider: manage Squadcast resources declaratively."""

__version__ = "0.1.0"
