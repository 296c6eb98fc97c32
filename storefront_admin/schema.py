"""GraphQL schema exposing the product import queries and mutations."""

import graphene

from .extensions.importing.schema import ImportMutations, ImportQuery


class Query(ImportQuery, graphene.ObjectType):
    pass


class Mutation(ImportMutations, graphene.ObjectType):
    pass


schema = graphene.Schema(query=Query, mutation=Mutation)
