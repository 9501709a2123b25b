"""Repository tree modelling utilities.

This package provides an immutable model of a repository's file hierarchy and
the transformations built on it: statistics, filtering, chunking for lazy
loading, and export to text, JSON, and Markdown.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("repotree")
except PackageNotFoundError:
    __version__ = "unknown"
