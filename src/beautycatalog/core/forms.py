"""Helpers for validating partial JSON payloads with Django forms."""

from django import forms
from django.forms.models import model_to_dict

# Largest value a PositiveIntegerField column holds on every backend
MAX_INTEGER = 2147483647


def count_field(min_value=0, **kwargs):
    """Integer form field bounded to the PositiveIntegerField range."""
    return forms.IntegerField(min_value=min_value, max_value=MAX_INTEGER, **kwargs)


def merge_payload(payload, instance, fields):
    """Overlay a partial JSON payload on the instance's current values.

    Missing keys keep their stored value; explicit nulls become empty
    strings so the form reports them as missing when required.
    """
    data = model_to_dict(instance, fields=fields)
    data.update({key: value for key, value in payload.items() if key in fields})
    for key in fields:
        if data.get(key) is None:
            data[key] = ""
    return data


def payload_data(payload, fields):
    """Pick ``fields`` from a JSON payload, mapping nulls to empty strings."""
    return {key: "" if payload.get(key) is None else payload.get(key) for key in fields}
