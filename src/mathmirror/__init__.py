"""Render TeX math in a published site tree to SVG."""

__version__ = "0.1.0"
