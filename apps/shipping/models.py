"""
Shipping Models - Per-country Rates
Tables: shipping_countries
"""
from django.core.validators import MinValueValidator
from django.db import models
from apps.core.models import BaseModel
from apps.core.utils import normalize_code


class ShippingCountry(BaseModel):
    """
    A destination the store ships to, with its flat rate and optional
    free-shipping threshold. One active row is flagged as the default.
    """
    name = models.CharField(max_length=120)
    code = models.CharField(max_length=3, unique=True, help_text="ISO-like country code, e.g. KW")
    shipping_rate = models.DecimalField(
        max_digits=10, decimal_places=2, default=2, validators=[MinValueValidator(0)]
    )
    free_threshold = models.DecimalField(
        max_digits=10, decimal_places=2, default=50, validators=[MinValueValidator(0)]
    )
    enable_free_threshold = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)
    is_default = models.BooleanField(default=False, db_index=True)

    class Meta:
        db_table = 'shipping_countries'
        verbose_name = 'Shipping Country'
        verbose_name_plural = 'Shipping Countries'
        ordering = ['-is_default', 'name']
        constraints = [
            models.UniqueConstraint(
                fields=['is_default'],
                condition=models.Q(is_default=True),
                name='shipping_single_default_country',
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"

    def save(self, *args, **kwargs):
        self.code = normalize_code(self.code)
        super().save(*args, **kwargs)
