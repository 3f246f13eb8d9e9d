"""Integration operator: turns Integration resources into cluster objects and built kits."""

__version__ = "0.1.0"
