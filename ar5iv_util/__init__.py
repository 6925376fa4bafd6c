"""Tools for maintaining a local mirror of arXiv article sources: id listing, snapshot scanning and source downloads."""

__version__ = "0.1.0"