"""Management command to seed currencies, sample products and the admin user."""

import os
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from beautycatalog.catalog.models import DEFAULT_CURRENCIES, Currency, Product


User = get_user_model()


PRODUCTS = [
    {
        "name": "Base Líquida Matte",
        "description": "Base de larga duración con acabado mate y cobertura media.",
        "price": Decimal("450.00"),
        "cost_price": Decimal("270.00"),
        "category": "Maquillaje",
        "brand": "Maybelline",
        "stock_quantity": 20,
        "min_stock_level": 5,
    },
    {
        "name": "Labial Hidratante",
        "description": "Labial cremoso con vitamina E.",
        "price": Decimal("220.00"),
        "cost_price": Decimal("120.00"),
        "category": "Maquillaje",
        "brand": "L'Oréal",
        "stock_quantity": 35,
        "min_stock_level": 10,
    },
    {
        "name": "Sérum Vitamina C",
        "description": "Sérum iluminador para todo tipo de piel.",
        "price": Decimal("780.00"),
        "cost_price": None,
        "category": "Cuidado de la Piel",
        "brand": "The Ordinary",
        "stock_quantity": 12,
        "min_stock_level": 4,
    },
    {
        "name": "Shampoo Reparador",
        "description": "Shampoo con keratina para cabello dañado.",
        "price": Decimal("310.00"),
        "cost_price": Decimal("180.00"),
        "category": "Cabello",
        "brand": "Pantene",
        "stock_quantity": 8,
        "min_stock_level": 10,
    },
    {
        "name": "Perfume Floral 50ml",
        "description": "Fragancia floral con notas de jazmín y rosa.",
        "price": Decimal("1250.00"),
        "cost_price": Decimal("800.00"),
        "category": "Fragancias",
        "brand": "Carolina Herrera",
        "stock_quantity": 6,
        "min_stock_level": 2,
    },
]


class Command(BaseCommand):
    help = "Seed currencies, optional sample products and the admin user"

    def add_arguments(self, parser):
        parser.add_argument(
            "--with-products",
            action="store_true",
            help="Also create sample products (skipped when a product with the same name exists)",
        )

    def handle(self, *args, **options):
        self.stdout.write("\nSeeding currencies...")
        for data in DEFAULT_CURRENCIES:
            _, created = Currency.objects.update_or_create(
                code=data["code"],
                defaults={k: v for k, v in data.items() if k != "code"},
            )
            label = "Created" if created else "Updated"
            self.stdout.write(f"  {label}: {data['code']}")

        if options["with_products"]:
            self.stdout.write("\nSeeding sample products...")
            currency = Currency.objects.filter(code="NIO").first()
            for data in PRODUCTS:
                if Product.objects.filter(name=data["name"]).exists():
                    self.stdout.write(f"  Skipping existing product: {data['name']}")
                    continue
                Product.objects.create(currency=currency, **data)
                self.stdout.write(self.style.SUCCESS(f"  Created: {data['name']}"))

        self.seed_admin()
        self.stdout.write(self.style.SUCCESS("\nDone."))

    def seed_admin(self):
        email = os.environ.get("ADMIN_EMAIL", "").strip().lower()
        password = os.environ.get("ADMIN_PASSWORD", "")
        if not email or not password:
            self.stdout.write(self.style.WARNING("\nADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin user."))
            return

        user = User.objects.filter(email__iexact=email).first()
        if user:
            self.stdout.write(f"\nAdmin user already exists: {email}")
            return

        User.objects.create_superuser(email=email, password=password)
        self.stdout.write(self.style.SUCCESS(f"\nCreated admin user: {email}"))
