"""
Sample Data Generator for the Lumière storefront

Seeds the catalog, the default shipping destinations, a few discount codes,
an admin account and a batch of orders placed through the real checkout
pipeline so totals, discount usage and order numbers are consistent.
"""
import os
import sys
import random
from datetime import timedelta
from decimal import Decimal

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Setup Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.base')

import django
django.setup()

from django.contrib.auth import get_user_model
from django.utils import timezone
from faker import Faker

from apps.catalog.models import Product
from apps.content.models import SiteContent
from apps.content.services import save_section
from apps.core.exceptions import BusinessRuleViolation
from apps.discounts.models import Discount
from apps.orders.lifecycle import change_payment_status, change_status
from apps.orders.models import Order
from apps.orders.services import place_order
from apps.shipping.models import ShippingCountry
from apps.shipping.services import set_default_country

fake = Faker()

PRODUCT_TEMPLATES = [
    ('The Enchanté Gown', 'Evening Wear', 'Silk charmeuse', 120, 260),
    ('Midnight Silk Slip', 'Dresses', 'Silk', 45, 95),
    ('Classic Leather Tote', 'Accessories', 'Calf leather', 55, 140),
    ('Cashmere Wrap Coat', 'Outerwear', 'Cashmere', 180, 320),
    ('Gold Chain Necklace', 'Jewelry', '14k gold', 30, 90),
    ('Pleated Midi Skirt', 'Skirts', 'Crepe', 25, 60),
    ('Linen Wide-Leg Trousers', 'Trousers', 'Linen', 28, 65),
    ('Little Black Dress', 'Dresses', 'Wool blend', 40, 110),
    ('Satin Evening Clutch', 'Accessories', 'Satin', 18, 45),
    ('Tailored Blazer', 'Outerwear', 'Wool', 70, 150),
]

COLORS = ['Black', 'Ivory', 'Champagne', 'Blush', 'Emerald', 'Navy', 'Camel']

COUNTRIES = [
    # name, code, rate, free threshold, default
    ('Kuwait', 'KW', Decimal('2'), Decimal('50'), True),
    ('Saudi Arabia', 'SA', Decimal('5'), Decimal('100'), False),
    ('United Arab Emirates', 'AE', Decimal('5'), Decimal('100'), False),
    ('Bahrain', 'BH', Decimal('4'), Decimal('80'), False),
    ('Qatar', 'QA', Decimal('4'), Decimal('80'), False),
]

DISCOUNTS = [
    # code, type, value, min order, max uses
    ('SAVE10', Discount.TYPE_PERCENTAGE, Decimal('10'), Decimal('0'), 0),
    ('WELCOME5', Discount.TYPE_FIXED, Decimal('5'), Decimal('30'), 0),
    ('VIP25', Discount.TYPE_PERCENTAGE, Decimal('25'), Decimal('100'), 20),
]


def generate_admin():
    """Create the back-office admin account."""
    User = get_user_model()
    admin, created = User.objects.get_or_create(
        username='admin',
        defaults={'email': 'admin@lumiere.example', 'is_staff': True, 'is_superuser': True},
    )
    if created:
        admin.set_password(os.getenv('ADMIN_PASSWORD', 'admin12345'))
        admin.save()
    print(f"Admin account: {admin.username}")
    return admin


def generate_products(count=30):
    """Generate catalog products."""
    print(f"Generating {count} products...")
    products = []

    for index in range(count):
        name, category, material, min_price, max_price = random.choice(PRODUCT_TEMPLATES)
        price = Decimal(random.randint(min_price, max_price))
        markup = random.choice([0, 0, 10, 20])
        product = Product.objects.create(
            name=name if index < len(PRODUCT_TEMPLATES) else f"{name} {fake.word().title()}",
            price=price,
            compare_at_price=price + markup if markup else None,
            description=fake.paragraph(nb_sentences=3),
            category=category,
            image_url=f"https://picsum.photos/seed/{fake.uuid4()}/800/1000",
            in_stock=random.random() > 0.1,
            featured=index < 3,
            new_arrival=random.random() > 0.5,
            colors=random.sample(COLORS, k=random.randint(1, 3)),
            material=material,
        )
        products.append(product)

    print(f"Created {len(products)} products")
    return products


def generate_shipping_countries():
    """Create shipping destinations; Kuwait is the default."""
    print("Generating shipping countries...")
    countries = []

    for name, code, rate, threshold, is_default in COUNTRIES:
        country = ShippingCountry.objects.create(
            name=name,
            code=code,
            shipping_rate=rate,
            free_threshold=threshold,
            enable_free_threshold=True,
        )
        if is_default:
            set_default_country(country)
        countries.append(country)

    print(f"Created {len(countries)} shipping countries")
    return countries


def generate_discounts():
    """Create sample discount codes."""
    print("Generating discount codes...")
    discounts = []

    for code, discount_type, value, min_order, max_uses in DISCOUNTS:
        discounts.append(Discount.objects.create(
            code=code,
            discount_type=discount_type,
            value=value,
            min_order_amount=min_order,
            max_uses=max_uses,
            expires_at=timezone.now() + timedelta(days=90),
        ))

    print(f"Created {len(discounts)} discount codes")
    return discounts


def generate_site_content():
    """Fill the home page sections."""
    print("Generating site content...")
    sections = [
        save_section(SiteContent.SECTION_HERO, {
            "title": "Timeless Elegance",
            "subtitle": "The new evening collection",
            "button_text": "Shop Now",
            "button_link": "/shop",
            "image_url": fake.image_url(),
        }),
        save_section(SiteContent.SECTION_BRAND_STORY, {
            "title": "Our Story",
            "description": fake.paragraph(nb_sentences=4),
        }),
        save_section(SiteContent.SECTION_NEWSLETTER, {
            "title": "Join the List",
            "subtitle": "Early access to new arrivals",
            "button_text": "Subscribe",
        }),
    ]

    print(f"Created {len(sections)} content sections")
    return sections


def generate_orders(products, countries, discounts, count=40):
    """Place orders through the checkout pipeline, then advance some of them."""
    print(f"Generating {count} orders...")
    orders = []

    for _ in range(count):
        picked = random.sample(products, k=random.randint(1, 3))
        items = [
            {
                'product_id': product.id,
                'name': product.name,
                'price': product.price,
                'quantity': random.randint(1, 2),
                'size': random.choice(product.sizes),
                'color': random.choice(product.colors) if product.colors else '',
                'image': product.image_url,
            }
            for product in picked
        ]
        customer = fake.name()
        country = random.choice(countries)
        code = random.choice(discounts).code if random.random() > 0.6 else None

        try:
            order = place_order(
                customer_name=customer,
                customer_email=fake.unique.email(),
                items=items,
                shipping_address={
                    'name': customer,
                    'line1': fake.street_address(),
                    'city': fake.city(),
                    'state': fake.state(),
                    'postal_code': fake.postcode(),
                    'country': country.code,
                    'phone': fake.msisdn()[:12],
                },
                payment_method=random.choice(['card', 'cod', 'whatsapp']),
                discount_code=code,
            )
        except BusinessRuleViolation as e:
            print(f"  skipped order: {e.message}")
            continue

        target = random.choices(
            [Order.STATUS_PENDING, Order.STATUS_PROCESSING, Order.STATUS_SHIPPED,
             Order.STATUS_DELIVERED, Order.STATUS_CANCELLED],
            weights=[30, 20, 20, 25, 5],
        )[0]
        if target != Order.STATUS_PENDING:
            order = change_status(order.id, target)
        if target in (Order.STATUS_SHIPPED, Order.STATUS_DELIVERED):
            order = change_payment_status(order.id, Order.PAYMENT_PAID)
        orders.append(order)

    print(f"Created {len(orders)} orders")
    return orders


def clear_all_data():
    """Clear all existing data."""
    print("Clearing existing data...")

    Order.objects.all().delete()
    Discount.objects.all().delete()
    ShippingCountry.objects.all().delete()
    Product.objects.all().delete()
    SiteContent.objects.all().delete()

    print("All data cleared")


def main():
    """Main function to generate all data."""
    print("\n" + "="*60)
    print("Lumière Sample Data Generator")
    print("="*60 + "\n")

    clear_all_data()

    generate_admin()
    products = generate_products(30)
    countries = generate_shipping_countries()
    discounts = generate_discounts()
    sections = generate_site_content()
    orders = generate_orders(products, countries, discounts, 40)

    print("\n" + "="*60)
    print("Data Generation Complete!")
    print("="*60)
    print(f"\nSummary:")
    print(f"  - Products: {len(products)}")
    print(f"  - Shipping Countries: {len(countries)}")
    print(f"  - Discount Codes: {len(discounts)}")
    print(f"  - Content Sections: {len(sections)}")
    print(f"  - Orders: {len(orders)}")
    print()


if __name__ == '__main__':
    main()
