import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, null=True)),
                ("hsn", models.CharField(blank=True, max_length=20, null=True, verbose_name="HSN code")),
                ("unit", models.CharField(blank=True, max_length=20, null=True)),
                ("price", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("gst_rate", models.DecimalField(decimal_places=2, default=0, max_digits=5, verbose_name="GST (%)")),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Quotation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quote_no", models.CharField(blank=True, max_length=30, null=True, unique=True)),
                ("quote_date", models.DateField()),
                ("customer_name", models.CharField(max_length=200)),
                ("customer_phone", models.CharField(blank=True, max_length=40, null=True)),
                ("customer_email", models.CharField(blank=True, max_length=200, null=True)),
                ("customer_address", models.TextField(blank=True, null=True)),
                ("customer_gstin", models.CharField(blank=True, max_length=20, null=True, verbose_name="Customer GSTIN")),
                ("subtotal", models.DecimalField(decimal_places=2, default=0, max_digits=14)),
                ("cgst_total", models.DecimalField(decimal_places=2, default=0, max_digits=14)),
                ("sgst_total", models.DecimalField(decimal_places=2, default=0, max_digits=14)),
                ("total", models.DecimalField(decimal_places=2, default=0, max_digits=14)),
                ("notes", models.TextField(blank=True, null=True)),
                ("proposal_items", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-id"],
            },
        ),
        migrations.CreateModel(
            name="QuotationItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, null=True)),
                ("hsn", models.CharField(blank=True, max_length=20, null=True)),
                ("unit", models.CharField(blank=True, max_length=20, null=True)),
                ("qty", models.FloatField(default=0)),
                ("unit_price", models.FloatField(default=0)),
                ("gst_rate", models.FloatField(default=0)),
                ("taxable", models.DecimalField(decimal_places=2, default=0, max_digits=14)),
                ("cgst", models.DecimalField(decimal_places=2, default=0, max_digits=14)),
                ("sgst", models.DecimalField(decimal_places=2, default=0, max_digits=14)),
                ("total", models.DecimalField(decimal_places=2, default=0, max_digits=14)),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="quotation.product",
                    ),
                ),
                (
                    "quotation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="quotation.quotation",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
