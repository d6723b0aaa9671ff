"""
GraphQL facade.

Typed ``userRegister`` / ``userMe`` surface over the registration service.
"""

from src.api.graphql.schema import graphql_router, schema

__all__ = ["graphql_router", "schema"]
