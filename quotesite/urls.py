from django.urls import include, path

urlpatterns = [
    path("", include("quotation.urls")),
]
