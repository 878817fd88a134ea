"""Validation forms for inventory payloads."""

from django import forms
from django.utils import timezone

from beautycatalog.catalog.models import Product
from beautycatalog.core.forms import MAX_INTEGER, count_field

from .models import InventoryRecord

RECORD_FIELDS = [
    "purchase_price",
    "purchase_quantity",
    "purchase_date",
    "supplier_name",
    "supplier_contact",
    "notes",
]


class InventoryRecordForm(forms.ModelForm):
    """New purchase batch.

    ``current_stock``, when given, replaces the product's stock level
    instead of adding the purchased quantity to it.
    """

    product = forms.ModelChoiceField(
        queryset=Product.objects.active(),
        error_messages={"invalid_choice": "Product not found or inactive"},
    )
    purchase_date = forms.DateTimeField(required=False)
    purchase_quantity = count_field(min_value=1)
    current_stock = count_field(required=False)

    class Meta:
        model = InventoryRecord
        fields = ["product", *RECORD_FIELDS]

    def clean_purchase_date(self):
        return self.cleaned_data["purchase_date"] or timezone.now()

    def clean(self):
        cleaned_data = super().clean()
        product = cleaned_data.get("product")
        quantity = cleaned_data.get("purchase_quantity")
        if product and quantity and cleaned_data.get("current_stock") is None:
            if product.stock_quantity + quantity > MAX_INTEGER:
                self.add_error("purchase_quantity", "Resulting stock is too large")
        return cleaned_data


class InventoryRecordUpdateForm(forms.ModelForm):
    purchase_quantity = count_field(min_value=1)
    purchase_date = forms.DateTimeField(required=False)

    class Meta:
        model = InventoryRecord
        fields = RECORD_FIELDS

    def clean_purchase_date(self):
        return self.cleaned_data["purchase_date"] or self.instance.purchase_date
