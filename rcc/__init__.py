"""rcc — a minimal C-subset compiler emitting assembly text."""

__version__ = "0.1.0"
