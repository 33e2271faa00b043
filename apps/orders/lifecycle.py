"""
Order Lifecycle Tracker

status moves forward through pending -> processing -> shipped -> delivered
(steps may be skipped); cancelled and refunded are reachable from any
non-terminal status. delivered, cancelled and refunded are terminal.
payment_status moves unpaid -> paid -> refunded.

Each change is a single-field update. Nothing cascades: cancelling does not
give back a discount use or restock anything.
"""
import logging
from typing import Dict, FrozenSet

from django.db import transaction

from apps.core.exceptions import InvalidTransition, NotFoundException, ValidationException
from .models import Order

logger = logging.getLogger(__name__)


STATUS_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    Order.STATUS_PENDING: frozenset({
        Order.STATUS_PROCESSING,
        Order.STATUS_SHIPPED,
        Order.STATUS_DELIVERED,
        Order.STATUS_CANCELLED,
        Order.STATUS_REFUNDED,
    }),
    Order.STATUS_PROCESSING: frozenset({
        Order.STATUS_SHIPPED,
        Order.STATUS_DELIVERED,
        Order.STATUS_CANCELLED,
        Order.STATUS_REFUNDED,
    }),
    Order.STATUS_SHIPPED: frozenset({
        Order.STATUS_DELIVERED,
        Order.STATUS_CANCELLED,
        Order.STATUS_REFUNDED,
    }),
    Order.STATUS_DELIVERED: frozenset(),
    Order.STATUS_CANCELLED: frozenset(),
    Order.STATUS_REFUNDED: frozenset(),
}

PAYMENT_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    Order.PAYMENT_UNPAID: frozenset({Order.PAYMENT_PAID}),
    Order.PAYMENT_PAID: frozenset({Order.PAYMENT_REFUNDED}),
    Order.PAYMENT_REFUNDED: frozenset(),
}

TRANSITION_TABLES = {
    'status': STATUS_TRANSITIONS,
    'payment_status': PAYMENT_TRANSITIONS,
}


def can_transition(field: str, current: str, target: str) -> bool:
    table = TRANSITION_TABLES[field]
    return current == target or target in table.get(current, frozenset())


def is_terminal(status: str) -> bool:
    return not STATUS_TRANSITIONS.get(status)


def _transition(order_id, field: str, target: str) -> Order:
    table = TRANSITION_TABLES[field]
    if target not in table:
        raise ValidationException(f"Invalid {field.replace('_', ' ')}: {target!r}", field=field)

    with transaction.atomic():
        order = Order.objects.select_for_update().filter(pk=order_id).first()
        if order is None:
            raise NotFoundException("Order", str(order_id))

        current = getattr(order, field)
        if current == target:
            return order
        if not can_transition(field, current, target):
            logger.warning(f"Rejected {field} change on {order.order_number}: {current} -> {target}")
            raise InvalidTransition(field, current, target)

        setattr(order, field, target)
        order.save(update_fields=[field, 'updated_at'])

    logger.info(f"Order {order.order_number} {field}: {current} -> {target}")
    return order


def change_status(order_id, target: str) -> Order:
    """Move an order's fulfilment status along the transition table."""
    return _transition(order_id, 'status', target)


def change_payment_status(order_id, target: str) -> Order:
    """Move an order's payment status along the transition table."""
    return _transition(order_id, 'payment_status', target)
