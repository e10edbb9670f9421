"""
                    Eats Ordering Backend

GraphQL backend for a restaurant ordering platform: user accounts with
role-based access, restaurant / category / dish catalog management
and order placement on top of an async SQLAlchemy database layer.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
