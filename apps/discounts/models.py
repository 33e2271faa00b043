"""
Discount Models - Promotional Codes
Tables: discounts
"""
from django.core.validators import MinValueValidator
from django.db import models
from apps.core.models import BaseModel
from apps.core.utils import normalize_code


class Discount(BaseModel):
    """
    A promotional code redeemable at checkout.
    max_uses = 0 means unlimited redemptions.
    """
    TYPE_PERCENTAGE = 'percentage'
    TYPE_FIXED = 'fixed'
    TYPE_CHOICES = [
        (TYPE_PERCENTAGE, 'Percentage'),
        (TYPE_FIXED, 'Fixed Amount'),
    ]

    code = models.CharField(max_length=50, unique=True)
    discount_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    value = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    min_order_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    max_uses = models.PositiveIntegerField(default=0, help_text="0 = unlimited")
    used_count = models.PositiveIntegerField(default=0)
    expires_at = models.DateTimeField(blank=True, null=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'discounts'
        verbose_name = 'Discount'
        verbose_name_plural = 'Discounts'
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(max_uses=0) | models.Q(used_count__lte=models.F('max_uses')),
                name='discount_used_count_within_max_uses',
            ),
            models.CheckConstraint(
                condition=~models.Q(discount_type='percentage') | models.Q(value__lte=100),
                name='discount_percentage_at_most_100',
            ),
        ]

    def __str__(self):
        return f"{self.code} ({self.discount_type} {self.value})"

    @property
    def is_unlimited(self) -> bool:
        return self.max_uses == 0

    def save(self, *args, **kwargs):
        self.code = normalize_code(self.code)
        super().save(*args, **kwargs)
