"""Ingredient co-occurrence mining for a food stall's usage history."""
__version__ = "0.1.0"
