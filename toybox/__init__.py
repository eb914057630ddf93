"""Multi-call command dispatcher with option-string parsing and shared helpers."""

__version__ = "0.1.0"