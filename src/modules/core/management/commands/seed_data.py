from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from modules.products.models import Product

CATALOG = [
    (
        "Laptop Gaming Pro",
        "High-performance gaming laptop with RTX 4070",
        Decimal("2500.00"),
        10,
    ),
    (
        "Wireless Headphones",
        "Noise-cancelling wireless headphones with 30h battery",
        Decimal("299.99"),
        25,
    ),
    (
        "Smartphone Ultra",
        "Latest smartphone with 512GB storage and triple camera",
        Decimal("1199.00"),
        15,
    ),
    (
        "Mechanical Keyboard",
        "RGB mechanical keyboard with blue switches",
        Decimal("149.99"),
        30,
    ),
    ('4K Monitor 32"', "32-inch 4K UHD monitor with HDR support", Decimal("699.99"), 8),
]


class Command(BaseCommand):
    help = "Seed the database with an API user and the demo catalog."

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        products_created = self._seed_products()

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: users={users_created}, products={products_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        if User.objects.filter(username="storefront").exists():
            return 0
        User.objects.create_user("storefront", password="storefront123")
        return 1

    def _seed_products(self) -> int:
        if Product.objects.exists():
            self.stdout.write(self.style.WARNING("Products already seeded, skipping."))
            return 0
        Product.objects.bulk_create(
            Product(name=name, description=description, price=price, stock=stock)
            for name, description, price, stock in CATALOG
        )
        return len(CATALOG)
