"""A small tree-walking interpreter for a Lisp-like language, evaluated from node trees."""

__version__ = "0.1.0"
__all__ = ["__version__"]