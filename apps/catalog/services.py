"""
Catalog queries used by the storefront and the back-office
"""
import logging
from typing import Dict, List, Optional

from django.db.models import Q, QuerySet

from apps.core.utils import storefront_setting
from .models import Product

logger = logging.getLogger(__name__)

TRUE_VALUES = {'1', 'true', 'yes'}


def search_products(filters: Optional[Dict[str, str]] = None) -> QuerySet:
    """
    Products newest first, narrowed by optional query-string style filters:
    category, brand, featured, in_stock, new_arrival, q (name/description).
    """
    filters = filters or {}
    queryset = Product.objects.all().order_by('-created_at')

    if filters.get('category'):
        queryset = queryset.filter(category__iexact=filters['category'])
    if filters.get('brand'):
        queryset = queryset.filter(brand__iexact=filters['brand'])
    for flag in ('featured', 'in_stock', 'new_arrival'):
        if filters.get(flag) is not None and filters.get(flag) != '':
            queryset = queryset.filter(**{flag: str(filters[flag]).lower() in TRUE_VALUES})
    if filters.get('q'):
        term = filters['q']
        queryset = queryset.filter(Q(name__icontains=term) | Q(description__icontains=term))

    return queryset


def featured_products() -> QuerySet:
    return Product.objects.filter(featured=True).order_by('-created_at')[:storefront_setting('FEATURED_LIMIT')]


def distinct_labels(field: str) -> List[str]:
    """Distinct non-blank values of a product label field (category or brand)."""
    if field not in ('category', 'brand'):
        raise ValueError(f"Unsupported label field: {field}")
    values = (
        Product.objects.exclude(**{field: ''})
        .order_by(field)
        .values_list(field, flat=True)
        .distinct()
    )
    return list(values)
