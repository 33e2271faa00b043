"""
Order Assembler

Turns a finalized cart into a persisted Order:
1. Validate contact and shipping-address fields and the line items
2. Subtotal from the cart's price snapshots (catalog prices are not re-read)
3. Shipping fee resolved from the address country at order time
4. Discount redeemed inside the same transaction as the order insert
5. total = subtotal - discount + shipping + tax
6. Order number generated per attempt, retried on unique-index collisions
"""
import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from django.db import DatabaseError, IntegrityError, transaction

from apps.core.exceptions import EmptyCart, PersistenceException, ValidationException
from apps.core.utils import ZERO, generate_order_number, storefront_setting, to_money
from apps.discounts.services import redeem_discount
from apps.shipping.services import resolve_shipping
from .models import Order, OrderItem

logger = logging.getLogger(__name__)

REQUIRED_ADDRESS_FIELDS = ['name', 'line1', 'city', 'state', 'postal_code', 'country']
OPTIONAL_ADDRESS_FIELDS = ['line2', 'phone']
PAYMENT_METHODS = [choice for choice, _ in Order.PAYMENT_METHOD_CHOICES]


@dataclass
class CartLine:
    """A cart line as submitted at checkout."""
    product_id: Any
    name: str
    price: Decimal
    quantity: int
    size: str = ''
    color: str = ''
    image: str = ''

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass
class OrderTotals:
    subtotal: Decimal
    discount: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal
    discount_code: str = ''
    shipping_country: str = ''


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def build_cart_lines(items: Optional[List[Dict[str, Any]]]) -> List[CartLine]:
    """
    Validate raw line items and freeze them into CartLine values.
    """
    if not items:
        raise EmptyCart()

    lines = []
    for index, item in enumerate(items):
        for required in ('product_id', 'name', 'price', 'quantity'):
            if _blank(item.get(required)):
                raise ValidationException(f"Item {index + 1}: {required} is required", field=f"items.{required}")

        try:
            price = to_money(item['price'])
        except ValueError:
            raise ValidationException(f"Item {index + 1}: price must be a number", field="items.price")
        if price < ZERO:
            raise ValidationException(f"Item {index + 1}: price cannot be negative", field="items.price")

        try:
            product_id = uuid.UUID(str(item['product_id']))
        except ValueError:
            raise ValidationException(f"Item {index + 1}: product_id is not valid", field="items.product_id")

        quantity = item['quantity']
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationException(
                f"Item {index + 1}: quantity must be a positive integer", field="items.quantity"
            )

        lines.append(CartLine(
            product_id=product_id,
            name=str(item['name']).strip(),
            price=price,
            quantity=quantity,
            size=item.get('size') or '',
            color=item.get('color') or '',
            image=item.get('image') or '',
        ))
    return lines


def validate_contact(customer_name: Optional[str], customer_email: Optional[str]) -> None:
    if _blank(customer_name):
        raise ValidationException("Customer name is required", field="customer_name")
    if _blank(customer_email):
        raise ValidationException("Customer email is required", field="customer_email")


def freeze_shipping_address(address: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """
    Check the required address fields and copy the address into a plain dict.
    """
    if not address:
        raise ValidationException("Shipping address is required", field="shipping_address")

    for required in REQUIRED_ADDRESS_FIELDS:
        if _blank(address.get(required)):
            raise ValidationException(
                f"Shipping address {required.replace('_', ' ')} is required",
                field=f"shipping_address.{required}",
            )

    frozen = {name: str(address[name]).strip() for name in REQUIRED_ADDRESS_FIELDS}
    for optional in OPTIONAL_ADDRESS_FIELDS:
        if not _blank(address.get(optional)):
            frozen[optional] = str(address[optional]).strip()
    return frozen


def calculate_subtotal(lines: List[CartLine]) -> Decimal:
    return to_money(sum((line.line_total for line in lines), ZERO))


def calculate_tax(taxable: Decimal) -> Decimal:
    rate = Decimal(storefront_setting('TAX_RATE'))
    if rate <= 0:
        return ZERO
    return to_money(taxable * rate)


def _insert_order(
    totals: OrderTotals,
    lines: List[CartLine],
    order_fields: Dict[str, Any],
    number_generator: Callable[[], str],
) -> Order:
    """
    Insert the order and its items, regenerating the order number when the
    unique index rejects it.
    """
    max_attempts = storefront_setting('ORDER_NUMBER_MAX_ATTEMPTS')

    for attempt in range(1, max_attempts + 1):
        candidate = number_generator()
        try:
            with transaction.atomic():
                order = Order.objects.create(
                    order_number=candidate,
                    subtotal=totals.subtotal,
                    discount=totals.discount,
                    discount_code=totals.discount_code,
                    shipping=totals.shipping,
                    tax=totals.tax,
                    total=totals.total,
                    status=Order.STATUS_PENDING,
                    payment_status=Order.PAYMENT_UNPAID,
                    **order_fields,
                )
                OrderItem.objects.bulk_create([
                    OrderItem(
                        order=order,
                        product_id=line.product_id,
                        name=line.name,
                        price=line.price,
                        quantity=line.quantity,
                        size=line.size,
                        color=line.color,
                        image=line.image,
                        position=position,
                    )
                    for position, line in enumerate(lines)
                ])
            return order
        except IntegrityError as e:
            if not Order.objects.filter(order_number=candidate).exists():
                logger.exception(f"Order insert failed: {e}")
                raise PersistenceException(str(e), operation="order insert")
            logger.warning(f"Order number collision on {candidate} (attempt {attempt}/{max_attempts})")

    raise PersistenceException(
        f"could not generate a unique order number after {max_attempts} attempts",
        operation="order insert",
    )


def place_order(
    customer_name: str,
    customer_email: str,
    items: List[Dict[str, Any]],
    shipping_address: Dict[str, Any],
    payment_method: str = 'card',
    discount_code: Optional[str] = None,
    notes: Optional[str] = None,
    user=None,
    number_generator: Optional[Callable[[], str]] = None,
) -> Order:
    """
    Price a cart and persist it as a pending, unpaid Order.

    The discount use and the order row commit together: if anything after
    the redemption fails, the used_count increment rolls back with it.
    """
    lines = build_cart_lines(items)
    validate_contact(customer_name, customer_email)
    address = freeze_shipping_address(shipping_address)
    if payment_method not in PAYMENT_METHODS:
        raise ValidationException(f"Invalid payment method: {payment_method!r}", field="payment_method")

    number_generator = number_generator or generate_order_number
    subtotal = calculate_subtotal(lines)
    shipping_quote = resolve_shipping(address['country'], subtotal)

    order_fields = {
        'user': user if user is not None and getattr(user, 'is_authenticated', False) else None,
        'customer_name': customer_name.strip(),
        'customer_email': customer_email.strip(),
        'payment_method': payment_method,
        'shipping_address': address,
        'notes': (notes or '').strip(),
    }

    try:
        with transaction.atomic():
            discount_amount = ZERO
            applied_code = ''
            if not _blank(discount_code):
                quote = redeem_discount(discount_code, subtotal)
                discount_amount = quote.amount
                applied_code = quote.code

            tax = calculate_tax(subtotal - discount_amount)
            totals = OrderTotals(
                subtotal=subtotal,
                discount=discount_amount,
                shipping=shipping_quote.fee,
                tax=tax,
                total=subtotal - discount_amount + shipping_quote.fee + tax,
                discount_code=applied_code,
                shipping_country=shipping_quote.country_code,
            )
            order = _insert_order(totals, lines, order_fields, number_generator)
    except DatabaseError as e:
        logger.exception(f"Database failure while placing order: {e}")
        raise PersistenceException(str(e), operation="place order")

    logger.info(
        f"Order {order.order_number} placed - subtotal {totals.subtotal}, discount {totals.discount}, "
        f"shipping {totals.shipping} ({totals.shipping_country}), total {totals.total}"
    )
    return order
