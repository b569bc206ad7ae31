"""Resume-grounded interview question generation and answer evaluation."""

__version__ = "0.1.0"
