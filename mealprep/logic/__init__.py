"""Core business logic layer.

Subpackages:
- grocery: consolidating recipes into a grocery list and the removal overlay
- planning: weekly bucket state and recipe browsing
"""
__all__ = ["grocery", "planning"]
