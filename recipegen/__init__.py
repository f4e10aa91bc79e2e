"""Discover packages in a repository and synthesize recipes for them."""

__version__ = "0.1.0"
