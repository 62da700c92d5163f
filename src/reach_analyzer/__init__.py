"""reach-analyzer: find which entrypoints can reach modified code."""

__version__ = "0.1.0"
