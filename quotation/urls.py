from django.urls import path

from .views import (
    product_delete,
    product_edit,
    product_import,
    products,
    quote_edit,
    quote_new,
    quote_pdf,
    quotes,
)

urlpatterns = [
    path("", quote_new, name="quote_new"),
    path("quotes/", quotes, name="quotes"),
    path("quotes/<int:quote_id>/edit/", quote_edit, name="quote_edit"),
    path("quotes/<int:quote_id>/pdf/", quote_pdf, name="quote_pdf"),
    path("products/", products, name="products"),
    path("products/import/", product_import, name="product_import"),
    path("products/<int:product_id>/edit/", product_edit, name="product_edit"),
    path("products/<int:product_id>/delete/", product_delete, name="product_delete"),
]
