from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from modules.orders.models import Order
from modules.products.models import Product

# Prices are tax-exclusive CZK.
CATALOG = [
    (
        "Základní balíček",
        "Základní balíček služeb pro malé firmy. Zahrnuje základní fakturaci "
        "a správu kontaktů.",
        Decimal("1990.00"),
        100,
    ),
    (
        "Standardní balíček",
        "Standardní balíček služeb s rozšířenými funkcemi. Zahrnuje pokročilou "
        "fakturaci, správu skladu a reporting.",
        Decimal("4990.00"),
        50,
    ),
    (
        "Premium balíček",
        "Premium balíček s plnou podporou a všemi funkcemi. Zahrnuje neomezenou "
        "fakturaci, API přístup a prioritní podporu.",
        Decimal("9990.00"),
        25,
    ),
]


class Command(BaseCommand):
    help = "Seed the catalogue with the sample storefront products."

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete all orders and products before seeding.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["reset"]:
            deleted_orders, _ = Order.objects.all().delete()
            deleted_products, _ = Product.objects.all().delete()
            self.stdout.write(
                f"Removed {deleted_orders} orders and {deleted_products} products."
            )

        created = 0
        for title, description, price, quantity in CATALOG:
            _, was_created = Product.objects.get_or_create(
                title=title,
                defaults={
                    "description": description,
                    "price_czk": price,
                    "quantity": quantity,
                },
            )
            created += int(was_created)

        for product in Product.objects.order_by("price_czk"):
            self.stdout.write(
                f"  - {product.title}: {product.price_czk} CZK (qty: {product.quantity})"
            )
        self.stdout.write(self.style.SUCCESS(f"Seed completed: products={created}"))
