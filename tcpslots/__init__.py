"""A TCP text server with a fixed number of client slots and a line-based console."""

__version__ = "0.1.0"
__all__ = ["__version__"]