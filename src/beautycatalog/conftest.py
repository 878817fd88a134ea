"""Shared pytest fixtures for beautycatalog tests."""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.test import Client


User = get_user_model()


@pytest.fixture(autouse=True)
def empty_sse_registry():
    """Start and end every test with no open SSE connections."""
    from beautycatalog.notifications.services import sse

    sse.registry.clear()
    yield sse.registry
    sse.registry.clear()


@pytest.fixture
def staff_user(db):
    """Create a shop administrator."""
    return User.objects.create_user(
        email="admin@beautycatalog.test",
        password="testpass123",
        first_name="Admin",
        last_name="User",
        is_staff=True,
    )


@pytest.fixture
def shopper_user(db):
    """Create a non-staff user."""
    return User.objects.create_user(
        email="shopper@example.com",
        password="testpass123",
        is_staff=False,
    )


@pytest.fixture
def staff_client(staff_user):
    """Django test client with an admin session."""
    client = Client()
    client.force_login(staff_user)
    return client


@pytest.fixture
def shopper_client(shopper_user):
    client = Client()
    client.force_login(shopper_user)
    return client


@pytest.fixture
def staff_token(staff_user):
    """Create an API token for the admin."""
    from rest_framework.authtoken.models import Token

    return Token.objects.create(user=staff_user)


@pytest.fixture
def currency(db):
    """Create the shop's default currency."""
    from beautycatalog.catalog.models import Currency

    return Currency.objects.create(
        code="NIO",
        name="Córdoba Nicaragüense",
        symbol="C$",
        flag_emoji="🇳🇮",
    )


@pytest.fixture
def product(db, currency):
    """Create an active product with stock and a cost price."""
    from beautycatalog.catalog.models import Product

    return Product.objects.create(
        name="Labial Hidratante",
        description="Labial cremoso",
        price=Decimal("220.00"),
        cost_price=Decimal("120.00"),
        currency=currency,
        category="Maquillaje",
        brand="L'Oréal",
        stock_quantity=10,
        min_stock_level=3,
    )


@pytest.fixture
def other_product(db, currency):
    """Create a second active product without a cost price."""
    from beautycatalog.catalog.models import Product

    return Product.objects.create(
        name="Sérum Vitamina C",
        price=Decimal("100.00"),
        currency=currency,
        category="Cuidado de la Piel",
        brand="The Ordinary",
        stock_quantity=5,
        min_stock_level=1,
    )


@pytest.fixture
def inactive_product(db, currency):
    from beautycatalog.catalog.models import Product

    return Product.objects.create(
        name="Producto Descontinuado",
        price=Decimal("50.00"),
        currency=currency,
        stock_quantity=100,
        is_active=False,
    )
