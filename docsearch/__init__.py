"""Multi-source documentation ranking service."""

__version__ = "0.4.0"
