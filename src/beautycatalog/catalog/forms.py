"""Validation forms for catalog payloads."""

from django import forms
from django.conf import settings
from django.forms.models import model_to_dict

from beautycatalog.core.forms import count_field

from .models import Currency, Product

PRODUCT_FIELDS = [
    "name",
    "description",
    "price",
    "cost_price",
    "currency",
    "category",
    "brand",
    "image_url",
    "sku",
    "stock_quantity",
    "min_stock_level",
    "is_active",
]


class ProductForm(forms.ModelForm):
    stock_quantity = count_field()
    min_stock_level = count_field()

    class Meta:
        model = Product
        fields = PRODUCT_FIELDS

    def clean_name(self):
        name = self.cleaned_data["name"].strip()
        if not name:
            raise forms.ValidationError("This field is required.")
        return name

    def clean_category(self):
        return self.cleaned_data["category"].strip()


def _default_currency():
    code = settings.SHOP_DEFAULT_CURRENCY
    return code if Currency.objects.filter(code=code).exists() else None


def product_form_data(payload, instance=None):
    """Merge a JSON payload over defaults (create) or current values (update).

    Accepts ``currency_code`` as an alias of ``currency``.
    """
    payload = dict(payload)
    if "currency_code" in payload and "currency" not in payload:
        payload["currency"] = payload.pop("currency_code")

    if instance is None:
        base = {
            "is_active": True,
            "stock_quantity": 0,
            "min_stock_level": 0,
            "currency": _default_currency(),
        }
    else:
        base = model_to_dict(instance, fields=PRODUCT_FIELDS)

    data = {**base, **{k: v for k, v in payload.items() if k in PRODUCT_FIELDS}}
    # Optional text fields may arrive as null
    for field in ("description", "category", "brand", "image_url", "sku"):
        if data.get(field) is None:
            data[field] = ""
    return data


class StockForm(forms.Form):
    stock_quantity = count_field()
