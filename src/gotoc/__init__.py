"""gotoc: translate a small Go subset into C source text."""

__version__ = "0.1.0"
