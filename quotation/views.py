from __future__ import annotations

import json
import logging

from django.contrib import messages
from django.db import DatabaseError
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from .config import load_proposal_template
from .exceptions import QuoteNotFoundError, QuoteValidationError
from .forms import ProductForm, ProductImportForm, QuotationForm
from .models import Product
from .services.catalog_service import import_products
from .services.quote_service import build_quote_pdf, list_quotes, load_quote, save_quote
from .utils import format_date

logger = logging.getLogger(__name__)


def _quote_form_context(
    form: QuotationForm,
    *,
    page_title: str,
    form_action: str,
    submit_label: str,
    quote=None,
    proposal_items=None,
) -> dict:
    return {
        "form": form,
        "products": Product.objects.all(),
        "page_title": page_title,
        "form_action": form_action,
        "submit_label": submit_label,
        "quote": quote,
        "proposal_items": proposal_items if proposal_items is not None else load_proposal_template(),
    }


def _save_from_post(request: HttpRequest, context: dict, quote_id: int | None = None) -> HttpResponse:
    form = QuotationForm(request.POST)
    context["form"] = form
    if not form.is_valid():
        return render(request, "quotation/quote_form.html", context, status=400)

    try:
        saved_id = save_quote(form.cleaned_data, quote_id)
    except QuoteNotFoundError:
        return HttpResponse("Quote not found.", status=404)
    except QuoteValidationError as exc:
        logger.info("Rejected quotation: %s", exc)
        context["error"] = str(exc)
        return render(request, "quotation/quote_form.html", context, status=400)
    except DatabaseError:
        context["error"] = "Could not save the quotation. Please try again."
        return render(request, "quotation/quote_form.html", context, status=500)
    return redirect("quote_pdf", quote_id=saved_id)


@require_http_methods(["GET", "POST"])
def quote_new(request: HttpRequest) -> HttpResponse:
    context = _quote_form_context(
        QuotationForm(),
        page_title="New Quotation",
        form_action=reverse("quotes"),
        submit_label="Save & Download PDF",
    )
    if request.method == "POST":
        return _save_from_post(request, context)
    return render(request, "quotation/quote_form.html", context)


@require_http_methods(["GET", "POST"])
def quotes(request: HttpRequest) -> HttpResponse:
    if request.method == "POST":
        return quote_new(request)

    search = (request.GET.get("q") or "").strip()
    rows = [
        {
            "id": quote.pk,
            "quote_no": quote.quote_no,
            "quote_date_display": format_date(quote.quote_date),
            "customer_name": quote.customer_name,
            "total": quote.total,
        }
        for quote in list_quotes(search)
    ]
    return render(request, "quotation/quotes.html", {"quotes": rows, "search": search})


@require_http_methods(["GET", "POST"])
def quote_edit(request: HttpRequest, quote_id: int) -> HttpResponse:
    loaded = load_quote(quote_id)
    if loaded is None:
        return HttpResponse("Quote not found.", status=404)

    quote = loaded.quote
    form = QuotationForm(
        initial={
            "quote_date": quote.quote_date,
            "customer_name": quote.customer_name,
            "customer_phone": quote.customer_phone,
            "customer_email": quote.customer_email,
            "customer_address": quote.customer_address,
            "customer_gstin": quote.customer_gstin,
            "notes": quote.notes,
            "items_json": json.dumps(loaded.items),
            "proposal_items_json": json.dumps(loaded.proposal_items),
        }
    )
    context = _quote_form_context(
        form,
        page_title=f"Edit Quotation {quote.quote_no or ''}".strip(),
        form_action=reverse("quote_edit", kwargs={"quote_id": quote.pk}),
        submit_label="Update & Download PDF",
        quote=quote,
        proposal_items=loaded.proposal_items,
    )
    context["initial_items"] = loaded.items
    if request.method == "POST":
        return _save_from_post(request, context, quote.pk)
    return render(request, "quotation/quote_form.html", context)


@require_GET
def quote_pdf(request: HttpRequest, quote_id: int) -> HttpResponse:
    try:
        result = build_quote_pdf(quote_id)
    except QuoteNotFoundError:
        return HttpResponse("Quote not found.", status=404)
    response = HttpResponse(result.content, content_type=result.content_type)
    response["Content-Disposition"] = f'attachment; filename="{result.filename}"'
    response["Content-Length"] = str(len(result.content))
    response["Cache-Control"] = "no-store"
    return response


@require_http_methods(["GET", "POST"])
def products(request: HttpRequest) -> HttpResponse:
    context = {
        "form": ProductForm(),
        "import_form": ProductImportForm(),
        "products": Product.objects.all(),
    }
    if request.method != "POST":
        return render(request, "quotation/products.html", context)

    if not (request.POST.get("name") or "").strip():
        return redirect("products")

    form = ProductForm(request.POST)
    if not form.is_valid():
        context["form"] = form
        return render(request, "quotation/products.html", context, status=400)
    form.save()
    return redirect("products")


@require_POST
def product_import(request: HttpRequest) -> HttpResponse:
    form = ProductImportForm(request.POST, request.FILES)
    if not form.is_valid():
        context = {"form": ProductForm(), "import_form": form, "products": Product.objects.all()}
        return render(request, "quotation/products.html", context, status=400)

    try:
        result = import_products(form.cleaned_data["product_file"].read())
    except ValueError as exc:
        context = {
            "form": ProductForm(),
            "import_form": form,
            "products": Product.objects.all(),
            "error": str(exc),
        }
        return render(request, "quotation/products.html", context, status=400)

    messages.success(request, f"Imported {result.created} product(s), skipped {result.skipped} row(s).")
    return redirect("products")


@require_http_methods(["GET", "POST"])
def product_edit(request: HttpRequest, product_id: int) -> HttpResponse:
    product = Product.objects.filter(pk=product_id).first()
    if product is None:
        return HttpResponse("Product not found", status=404)

    if request.method != "POST":
        return render(request, "quotation/product_edit.html", {"form": ProductForm(instance=product), "product": product})

    form = ProductForm(request.POST, instance=product)
    if not form.is_valid():
        return render(request, "quotation/product_edit.html", {"form": form, "product": product}, status=400)
    form.save()
    return redirect("products")


@require_POST
def product_delete(request: HttpRequest, product_id: int) -> HttpResponse:
    Product.objects.filter(pk=product_id).delete()
    return redirect("products")
