"""Procedural content for a 2D side-scrolling city scene."""

__version__ = "0.1.0"
