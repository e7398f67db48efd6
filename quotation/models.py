from __future__ import annotations

from django.db import models


class Product(models.Model):
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    hsn = models.CharField("HSN code", max_length=20, blank=True, null=True)
    unit = models.CharField(max_length=20, blank=True, null=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    gst_rate = models.DecimalField("GST (%)", max_digits=5, decimal_places=2, default=0)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Quotation(models.Model):
    quote_no = models.CharField(max_length=30, unique=True, blank=True, null=True)
    quote_date = models.DateField()
    customer_name = models.CharField(max_length=200)
    customer_phone = models.CharField(max_length=40, blank=True, null=True)
    customer_email = models.CharField(max_length=200, blank=True, null=True)
    customer_address = models.TextField(blank=True, null=True)
    customer_gstin = models.CharField("Customer GSTIN", max_length=20, blank=True, null=True)
    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    cgst_total = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    sgst_total = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    notes = models.TextField(blank=True, null=True)
    # Normalized "items considered for proposal" rows, keyed by sr_no.
    proposal_items = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-id"]

    def __str__(self) -> str:
        return self.quote_no or f"quote-{self.pk}"


class QuotationItem(models.Model):
    quotation = models.ForeignKey(Quotation, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        Product, on_delete=models.SET_NULL, blank=True, null=True, related_name="+"
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    hsn = models.CharField(max_length=20, blank=True, null=True)
    unit = models.CharField(max_length=20, blank=True, null=True)
    qty = models.FloatField(default=0)
    unit_price = models.FloatField(default=0)
    gst_rate = models.FloatField(default=0)
    taxable = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    cgst = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    sgst = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=14, decimal_places=2, default=0)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return self.name
