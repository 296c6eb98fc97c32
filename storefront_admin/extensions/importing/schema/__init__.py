"""Import GraphQL schema exports."""

from .mutations import ImportMutations
from .queries import ImportQuery

__all__ = ["ImportQuery", "ImportMutations"]
