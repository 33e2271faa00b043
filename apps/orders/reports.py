"""
Back-office dashboard figures
"""
import logging
from datetime import datetime, time
from typing import Any, Dict

from django.contrib.auth import get_user_model
from django.db.models import Count, Sum
from django.utils import timezone

from apps.catalog.models import Product
from apps.catalog.services import distinct_labels
from apps.core.utils import ZERO
from .models import Order

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5


def _paid_revenue(**filters):
    result = Order.objects.filter(payment_status=Order.PAYMENT_PAID, **filters).aggregate(total=Sum('total'))
    return result['total'] or ZERO


def dashboard_stats() -> Dict[str, Any]:
    """
    Catalog, order and revenue counters plus the most recent records.
    Revenue only counts paid orders.
    """
    User = get_user_model()

    status_counts = {
        row['status']: row['count']
        for row in Order.objects.order_by().values('status').annotate(count=Count('id'))
    }
    today_start = timezone.make_aware(datetime.combine(timezone.localdate(), time.min))

    stats = {
        "total_users": User.objects.count(),
        "total_products": Product.objects.count(),
        "total_categories": len(distinct_labels('category')),
        "featured_products": Product.objects.filter(featured=True).count(),
        "in_stock_products": Product.objects.filter(in_stock=True).count(),
        "out_of_stock_products": Product.objects.filter(in_stock=False).count(),
        "total_orders": sum(status_counts.values()),
        "total_revenue": _paid_revenue(),
        "today_revenue": _paid_revenue(created_at__gte=today_start),
    }
    for status, _ in Order.STATUS_CHOICES:
        stats[f"{status}_orders"] = status_counts.get(status, 0)

    return {
        "stats": stats,
        "recent_users": list(
            User.objects.order_by('-date_joined')
            .values('id', 'username', 'email', 'is_staff', 'date_joined')[:RECENT_LIMIT]
        ),
        "recent_products": Product.objects.order_by('-created_at')[:RECENT_LIMIT],
        "recent_orders": Order.objects.prefetch_related('items').order_by('-created_at')[:RECENT_LIMIT],
    }
