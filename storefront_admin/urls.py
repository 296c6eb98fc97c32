"""Root URL configuration for storefront-admin."""

from django.urls import path
from django.views.decorators.csrf import csrf_exempt
from graphene_django.views import GraphQLView

from .extensions.importing.urls import importing_urlpatterns
from .schema import schema

urlpatterns = [
    *importing_urlpatterns(),
    path("graphql/", csrf_exempt(GraphQLView.as_view(schema=schema)), name="graphql"),
]
