"""Validation forms for store payloads."""

from django import forms

from .models import Customer, Order


class CheckoutForm(forms.Form):
    """Contact details submitted with a new order."""

    customer_name = forms.CharField(max_length=255)
    customer_email = forms.EmailField(required=False)
    customer_phone = forms.CharField(max_length=50, required=False)
    status = forms.ChoiceField(choices=Order.Status.choices, required=False)

    def clean_customer_email(self):
        return self.cleaned_data["customer_email"].strip().lower()

    def clean_status(self):
        return self.cleaned_data["status"] or Order.Status.PENDING


class OrderUpdateForm(forms.ModelForm):
    """Status and contact fields an admin may change on an order."""

    class Meta:
        model = Order
        fields = ["status", "customer_name", "customer_email", "customer_phone"]


class CustomerForm(forms.ModelForm):
    class Meta:
        model = Customer
        fields = ["name", "email", "phone", "address"]

    def clean_email(self):
        return self.cleaned_data["email"].strip().lower()

