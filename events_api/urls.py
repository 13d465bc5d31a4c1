from django.contrib import admin
from django.urls import path
from django.views.decorators.csrf import csrf_exempt

from strawberry.django.views import GraphQLView

from events_api.schema import schema


urlpatterns = [
    path("super/", admin.site.urls, name="admin"),
    path(
        "graphql/",
        csrf_exempt(GraphQLView.as_view(schema=schema, multipart_uploads_enabled=True)),
    ),
]
