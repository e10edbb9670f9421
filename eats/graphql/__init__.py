"""
GraphQL API layer (Strawberry).

Exposes ``schema`` and the ``get_context`` getter used by the FastAPI router.
"""

from eats.graphql.context import Context, get_context
from eats.graphql.schema import schema

__all__ = ["Context", "get_context", "schema"]
