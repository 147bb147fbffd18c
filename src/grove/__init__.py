"""Grove: grow ASCII trees while you focus."""

__version__ = "0.1.0"

__all__ = ["__version__"]
