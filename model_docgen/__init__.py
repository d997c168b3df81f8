"""Static documentation site generator for typed object models."""

__version__ = '1.0.0'
