from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.carts.models import CartItem
from apps.catalog.models import Product, Sku

# (name, brand, image, active, [(sku_code, price, stock, attributes, active)])
PRODUCTS = [
    (
        "Trail Running Shoe",
        "Peak",
        "https://picsum.photos/seed/trail-shoe/600/600",
        True,
        [
            ("TRS-BLK-42", "89.90", 25, {"color": "black", "size": "42"}, True),
            ("TRS-BLK-43", "89.90", 3, {"color": "black", "size": "43"}, True),
            ("TRS-RED-42", "94.50", 0, {"color": "red", "size": "42"}, True),
            ("TRS-RED-44", "94.50", 12, {"color": "red", "size": "44"}, False),
        ],
    ),
    (
        "Merino Crew Sock",
        "Woolly",
        "https://picsum.photos/seed/merino-sock/600/600",
        True,
        [
            ("MCS-GRY-M", "12.00", 200, {"color": "grey", "size": "M"}, True),
            ("MCS-GRY-L", "12.00", 150, {"color": "grey", "size": "L"}, True),
        ],
    ),
    (
        "Insulated Bottle 750ml",
        "Hydra",
        "https://picsum.photos/seed/bottle/600/600",
        True,
        [
            ("IB-750-STEEL", "25.00", 3, {"finish": "steel"}, True),
            ("IB-750-MATTE", "27.50", 40, {"finish": "matte"}, True),
        ],
    ),
    (
        "Retired Rain Shell",
        "Peak",
        "https://picsum.photos/seed/rain-shell/600/600",
        False,
        [
            ("RRS-BLU-M", "149.00", 8, {"color": "blue", "size": "M"}, True),
        ],
    ),
]


class Command(BaseCommand):
    help = (
        "Seed a small catalog of products and SKUs, including an offline SKU, "
        "an offline product and a sold-out SKU."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Delete existing cart lines, SKUs and products before seeding",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing cart lines and catalog...")
            CartItem.objects.all().delete()
            Sku.objects.all().delete()
            Product.objects.all().delete()

        self.stdout.write("Seeding products and SKUs...")
        sku_count = 0
        for name, brand, image, active, skus in PRODUCTS:
            product, _ = Product.objects.update_or_create(
                name=name,
                defaults={"brand": brand, "main_image": image, "is_active": active},
            )
            for code, price, stock, attributes, sku_active in skus:
                Sku.objects.update_or_create(
                    sku_code=code,
                    defaults={
                        "product": product,
                        "price": Decimal(price),
                        "stock": stock,
                        "attributes": attributes,
                        "is_active": sku_active,
                    },
                )
                sku_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Catalog seed completed: {len(PRODUCTS)} products, {sku_count} SKUs."
            )
        )
