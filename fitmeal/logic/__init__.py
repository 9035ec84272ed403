"""Core business logic layer.

Subpackages:
- auth: password hashing and JWT tokens
- progress: goal progress rules
- protocols: wizard steps, protocol generation and safety checks
- reporting: meal plan nutrition summaries
- shopping: shopping lists built from meal plans
"""
__all__ = ["auth", "progress", "protocols", "reporting", "shopping"]
