"""Command-line content manager for the blog's project and task entries."""

__version__ = "0.1.0"
