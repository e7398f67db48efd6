from datetime import date

from django import forms
from django.core.exceptions import ValidationError

from .models import Product

EXECUTABLE_EXTENSIONS = {
    ".exe",
    ".bat",
    ".cmd",
    ".sh",
    ".ps1",
    ".vbs",
    ".js",
    ".jar",
    ".msi",
    ".com",
    ".scr",
    ".apk",
    ".app",
    ".bin",
    ".dll",
}

EXCEL_EXTENSIONS = {".xlsx"}


def _extension(filename: str) -> str:
    return ("." + filename.rsplit(".", 1)[-1].lower()) if "." in filename else ""


class ProductForm(forms.ModelForm):
    class Meta:
        model = Product
        fields = ["name", "description", "hsn", "unit", "price", "gst_rate"]
        widgets = {
            "name": forms.TextInput(attrs={"placeholder": "e.g. 540 Wp Mono PERC module", "class": "form-input"}),
            "description": forms.Textarea(attrs={"rows": 2, "class": "form-input"}),
            "hsn": forms.TextInput(attrs={"placeholder": "8541", "class": "form-input"}),
            "unit": forms.TextInput(attrs={"placeholder": "Nos", "class": "form-input"}),
        }

    def clean_price(self):
        price = self.cleaned_data.get("price")
        if price is not None and price < 0:
            raise ValidationError("Price cannot be negative.")
        return price

    def clean_gst_rate(self):
        gst_rate = self.cleaned_data.get("gst_rate")
        if gst_rate is not None and gst_rate < 0:
            raise ValidationError("GST (%) cannot be negative.")
        return gst_rate


class ProductImportForm(forms.Form):
    product_file = forms.FileField(label="Product List (Excel)")

    def clean_product_file(self):
        file = self.cleaned_data.get("product_file")
        if not file:
            return file
        filename = file.name or ""
        ext = _extension(filename)
        if ext in EXECUTABLE_EXTENSIONS:
            raise ValidationError("Executable files are not allowed.")
        if ext not in EXCEL_EXTENSIONS:
            raise ValidationError("Please upload a valid Excel file (.xlsx).")
        return file


class QuotationForm(forms.Form):
    quote_date = forms.DateField(
        label="Quotation Date",
        initial=date.today,
        widget=forms.DateInput(attrs={"type": "date"}),
        required=False,
    )
    customer_name = forms.CharField(label="Customer Name", max_length=200, required=False)
    customer_phone = forms.CharField(label="Phone", max_length=40, required=False)
    customer_email = forms.CharField(label="Email", max_length=200, required=False)
    customer_address = forms.CharField(
        label="Address", widget=forms.Textarea(attrs={"rows": 3}), required=False
    )
    customer_gstin = forms.CharField(label="Customer GSTIN", max_length=20, required=False)
    notes = forms.CharField(label="Notes", widget=forms.Textarea(attrs={"rows": 3}), required=False)

    # Populated by the item grid on the page.
    items_json = forms.CharField(widget=forms.HiddenInput, required=False)
    proposal_items_json = forms.CharField(widget=forms.HiddenInput, required=False)
