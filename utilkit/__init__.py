"""Small data structures: bloom filters, linked lists, arenas and directed graphs."""

__version__ = "0.1.0"
__all__ = ["arena", "bloom", "bloomhash", "dllist", "graph"]