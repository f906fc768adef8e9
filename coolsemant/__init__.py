"""Semantic analysis and type checking for Cool syntax trees."""

__version__ = "0.1.0"
__all__ = ["classtable", "symtab", "tree", "typecheck", "utilities"]