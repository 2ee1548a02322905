"""Skeletal pose editing and bone retargeting core."""

__version__ = "0.1.0"
