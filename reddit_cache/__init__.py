"""Caching proxy giving index-addressable access to Reddit feeds."""

__version__ = "0.1.0"
