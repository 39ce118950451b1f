"""Maintenance operations for the blog content store (posts, categories, labels)."""

__version__ = "0.1.0"
