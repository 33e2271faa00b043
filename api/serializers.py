"""
API Serializers for Request/Response handling
"""
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import serializers

from apps.catalog.models import Product
from apps.content.models import SiteContent
from apps.core.utils import normalize_code
from apps.discounts.models import Discount
from apps.orders.models import Order, OrderItem
from apps.shipping.models import ShippingCountry


# === Catalog ===

class ProductSerializer(serializers.ModelSerializer):
    """
    Product as shown in the shop and edited in the back-office.
    """
    sizes = serializers.ListField(child=serializers.CharField(max_length=20), required=False)
    colors = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    images = serializers.ListField(child=serializers.URLField(max_length=500), required=False)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'price', 'compare_at_price', 'description', 'category', 'brand',
            'image_url', 'images', 'in_stock', 'featured', 'new_arrival', 'sizes', 'colors',
            'material', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


# === Discounts ===

class DiscountSerializer(serializers.ModelSerializer):
    """
    Discount code managed by admins. Codes are stored uppercase.
    """
    code = serializers.CharField(max_length=50)
    value = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))
    min_order_amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False
    )

    class Meta:
        model = Discount
        fields = [
            'id', 'code', 'discount_type', 'value', 'min_order_amount', 'max_uses',
            'used_count', 'expires_at', 'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'used_count', 'created_at', 'updated_at']

    def validate_code(self, value):
        code = normalize_code(value)
        if not code:
            raise serializers.ValidationError("Discount code is required")
        existing = Discount.objects.filter(code=code)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("Discount code already exists")
        return code

    def validate(self, attrs):
        discount_type = attrs.get('discount_type', getattr(self.instance, 'discount_type', None))
        value = attrs.get('value', getattr(self.instance, 'value', None))
        if discount_type == Discount.TYPE_PERCENTAGE and value is not None and value > 100:
            raise serializers.ValidationError({"value": "Percentage discounts must be between 0 and 100"})

        max_uses = attrs.get('max_uses')
        used_count = getattr(self.instance, 'used_count', 0)
        if max_uses and max_uses < used_count:
            raise serializers.ValidationError(
                {"max_uses": f"Max uses cannot be lower than the {used_count} uses already redeemed"}
            )
        return attrs


class DiscountValidateRequestSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50, allow_blank=True, help_text="Discount code as typed by the customer")
    subtotal = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), help_text="Cart subtotal in base currency"
    )


class DiscountQuoteSerializer(serializers.Serializer):
    valid = serializers.BooleanField()
    code = serializers.CharField()
    discount_type = serializers.CharField()
    value = serializers.DecimalField(max_digits=10, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    discount_amount = serializers.DecimalField(max_digits=12, decimal_places=2)


# === Shipping ===

class ShippingCountrySerializer(serializers.ModelSerializer):
    """
    Shipping destination. is_default is applied through a transactional swap
    by the view, never written directly.
    """
    code = serializers.CharField(max_length=3)
    shipping_rate = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))
    free_threshold = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False
    )
    is_default = serializers.BooleanField(required=False)

    class Meta:
        model = ShippingCountry
        fields = [
            'id', 'name', 'code', 'shipping_rate', 'free_threshold', 'enable_free_threshold',
            'is_active', 'is_default', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_code(self, value):
        code = normalize_code(value)
        if not code:
            raise serializers.ValidationError("Country code is required")
        existing = ShippingCountry.objects.filter(code=code)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("Country with this code already exists")
        return code


class ShippingQuoteRequestSerializer(serializers.Serializer):
    country = serializers.CharField(required=False, allow_blank=True, default='')
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))


class ShippingQuoteSerializer(serializers.Serializer):
    country_code = serializers.CharField()
    country_name = serializers.CharField()
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    fee = serializers.DecimalField(max_digits=12, decimal_places=2)
    free_shipping = serializers.BooleanField()
    fallback = serializers.BooleanField()


# === Orders ===

class CartLineSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    name = serializers.CharField(max_length=255)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))
    quantity = serializers.IntegerField(min_value=1)
    size = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    color = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    image = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class ShippingAddressSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    line1 = serializers.CharField(max_length=255)
    line2 = serializers.CharField(max_length=255, required=False, allow_blank=True)
    city = serializers.CharField(max_length=120)
    state = serializers.CharField(max_length=120)
    postal_code = serializers.CharField(max_length=20)
    country = serializers.CharField(max_length=120)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)


class OrderCreateSerializer(serializers.Serializer):
    """
    Checkout request. Totals are computed server-side; any totals the
    client sends are ignored.
    """
    customer_name = serializers.CharField(max_length=255)
    customer_email = serializers.EmailField()
    items = CartLineSerializer(many=True, allow_empty=True)
    shipping_address = ShippingAddressSerializer()
    payment_method = serializers.ChoiceField(choices=Order.PAYMENT_METHOD_CHOICES, default='card')
    discount_code = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ['product_id', 'name', 'price', 'quantity', 'size', 'color', 'image']


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'user', 'customer_email', 'customer_name', 'items',
            'subtotal', 'tax', 'shipping', 'discount', 'discount_code', 'total',
            'status', 'payment_status', 'payment_method', 'shipping_address', 'notes',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.CharField(help_text="Target fulfilment status")


class PaymentStatusSerializer(serializers.Serializer):
    payment_status = serializers.CharField(help_text="Target payment status")


# === Content ===

class SiteContentSerializer(serializers.ModelSerializer):
    class Meta:
        model = SiteContent
        fields = ['id', 'section', 'content', 'is_active', 'created_at', 'updated_at']
        read_only_fields = fields


class SiteContentUpdateSerializer(serializers.Serializer):
    content = serializers.DictField(help_text="Section payload: title, subtitle, image_url, items, ...")
    is_active = serializers.BooleanField(required=False)


# === Users ===

ROLE_USER = 'user'
ROLE_ADMIN = 'admin'


class UserSerializer(serializers.ModelSerializer):
    """
    Back-office view of an account. The admin role is Django's is_staff.
    """
    role = serializers.SerializerMethodField()

    class Meta:
        model = get_user_model()
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'role', 'is_active', 'date_joined']
        read_only_fields = fields

    def get_role(self, obj) -> str:
        return ROLE_ADMIN if obj.is_staff else ROLE_USER


class UserRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=[ROLE_USER, ROLE_ADMIN])


# === Service ===

class HealthCheckSerializer(serializers.Serializer):
    """
    Response serializer for health check.
    """
    status = serializers.CharField()
    version = serializers.CharField()
    database = serializers.CharField()
    shipping = serializers.CharField()
    timestamp = serializers.DateTimeField()
