"""A cooperative process table and a small shell with builtins over an in-memory filesystem."""

__version__ = "0.1.0"