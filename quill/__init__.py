"""Tokens, syntax tree, expression parser and resolved types for the Quill language."""

__version__ = "0.1.0"
__all__ = ["__version__"]