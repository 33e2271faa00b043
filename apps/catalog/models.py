"""
Catalog Models - Products
Tables: catalog_products
"""
from django.db import models
from apps.core.models import BaseModel


def default_sizes():
    return ['XS', 'S', 'M', 'L', 'XL']


class Product(BaseModel):
    """
    Product in the catalog. Prices are in the store's base currency.
    """
    name = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    compare_at_price = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    description = models.TextField()
    category = models.CharField(max_length=120, blank=True, default='', db_index=True)
    brand = models.CharField(max_length=120, default='Lumière')
    image_url = models.URLField(max_length=500)
    images = models.JSONField(default=list, blank=True)
    in_stock = models.BooleanField(default=True)
    featured = models.BooleanField(default=False)
    new_arrival = models.BooleanField(default=True)
    sizes = models.JSONField(default=default_sizes, blank=True)
    colors = models.JSONField(default=list, blank=True)
    material = models.CharField(max_length=255, blank=True, default='')

    class Meta:
        db_table = 'catalog_products'
        verbose_name = 'Product'
        verbose_name_plural = 'Products'

    def __str__(self):
        return f"{self.name} ({self.price})"
