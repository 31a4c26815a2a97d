from django.urls import include, path

from .views import index, test_db

urlpatterns = [
    path("", index),
    path("test-db", test_db),
    path("", include("orders.urls")),
]
