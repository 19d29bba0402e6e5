"""Core business logic layer.

Subpackages:
- pricing: ingredient price lookup, refresh and the daily throttle
- menu: candidate selection, menu composition and quick meal suggestions
- planning: meal plan CRUD and week copying
- shopping: building priced shopping lists
- reporting: nutrition totals
"""
__all__ = ["pricing", "menu", "planning", "shopping", "reporting"]
