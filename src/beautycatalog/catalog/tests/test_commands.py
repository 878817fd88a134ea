"""Tests for the seed_catalog management command."""

from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command

from beautycatalog.catalog.models import DEFAULT_CURRENCIES, Currency, Product

User = get_user_model()


@pytest.mark.django_db
class TestSeedCatalog:
    def test_seeds_currencies_only_by_default(self, monkeypatch):
        monkeypatch.delenv("ADMIN_EMAIL", raising=False)
        monkeypatch.delenv("ADMIN_PASSWORD", raising=False)

        call_command("seed_catalog", stdout=StringIO())

        assert Currency.objects.count() == len(DEFAULT_CURRENCIES)
        assert not Product.objects.exists()
        assert not User.objects.exists()

    def test_with_products_is_idempotent(self, monkeypatch):
        monkeypatch.delenv("ADMIN_EMAIL", raising=False)

        call_command("seed_catalog", "--with-products", stdout=StringIO())
        first = Product.objects.count()
        call_command("seed_catalog", "--with-products", stdout=StringIO())

        assert first > 0
        assert Product.objects.count() == first
        assert not Product.objects.filter(currency__isnull=True).exists()

    def test_creates_admin_from_environment(self, monkeypatch):
        monkeypatch.setenv("ADMIN_EMAIL", "Owner@Shop.test")
        monkeypatch.setenv("ADMIN_PASSWORD", "s3cret-pass")

        call_command("seed_catalog", stdout=StringIO())
        call_command("seed_catalog", stdout=StringIO())

        admin = User.objects.get()
        assert admin.email == "owner@shop.test"
        assert admin.is_staff and admin.is_superuser
        assert admin.check_password("s3cret-pass")
