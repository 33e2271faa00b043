"""
API Views for the Lumière storefront

This module provides REST API endpoints for:
- Catalog: product browsing and admin product management
- Checkout: discount validation, shipping quotes and order placement
- Site content: editable storefront sections
- Back-office: discounts, shipping countries, orders, users and dashboard stats
- Health Check: system health and status
"""
import math
import logging
from datetime import datetime, timezone as dt_timezone

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from drf_spectacular.utils import extend_schema, OpenApiExample, OpenApiParameter

from django.contrib.auth import get_user_model
from django.db import connection, transaction
from django.shortcuts import get_object_or_404

from .serializers import (
    ROLE_ADMIN,
    DiscountQuoteSerializer,
    DiscountSerializer,
    DiscountValidateRequestSerializer,
    HealthCheckSerializer,
    OrderCreateSerializer,
    OrderSerializer,
    OrderStatusSerializer,
    PaymentStatusSerializer,
    ProductSerializer,
    ShippingCountrySerializer,
    ShippingQuoteRequestSerializer,
    ShippingQuoteSerializer,
    SiteContentSerializer,
    SiteContentUpdateSerializer,
    UserRoleSerializer,
    UserSerializer,
)
from apps.catalog.models import Product
from apps.catalog.services import distinct_labels, featured_products, search_products
from apps.content.models import SiteContent
from apps.content.services import active_content_map, get_section, save_section
from apps.core.exceptions import BusinessRuleViolation
from apps.core.utils import storefront_setting
from apps.discounts.models import Discount
from apps.discounts.services import resolve_discount
from apps.orders.lifecycle import change_payment_status, change_status
from apps.orders.models import Order
from apps.orders.reports import dashboard_stats
from apps.orders.services import place_order
from apps.shipping.models import ShippingCountry
from apps.shipping.services import initialize_default_countries, resolve_shipping, set_default_country

logger = logging.getLogger(__name__)


# ============================================
# CATALOG
# ============================================

class ProductListView(APIView):
    """
    Product listing, newest first.
    """
    permission_classes = [AllowAny]

    @extend_schema(
        parameters=[
            OpenApiParameter('category', str, description="Exact category label"),
            OpenApiParameter('brand', str, description="Exact brand label"),
            OpenApiParameter('featured', bool),
            OpenApiParameter('in_stock', bool),
            OpenApiParameter('new_arrival', bool),
            OpenApiParameter('q', str, description="Search in name and description"),
        ],
        responses={200: ProductSerializer(many=True)},
        description="List catalog products"
    )
    def get(self, request):
        products = search_products(request.query_params)
        return Response(ProductSerializer(products, many=True).data)


class FeaturedProductsView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: ProductSerializer(many=True)}, description="Featured products for the home page")
    def get(self, request):
        return Response(ProductSerializer(featured_products(), many=True).data)


class ProductCategoriesView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: {'type': 'array', 'items': {'type': 'string'}}})
    def get(self, request):
        return Response(distinct_labels('category'))


class ProductBrandsView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: {'type': 'array', 'items': {'type': 'string'}}})
    def get(self, request):
        return Response(distinct_labels('brand'))


class ProductDetailView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: ProductSerializer})
    def get(self, request, pk):
        product = get_object_or_404(Product, pk=pk)
        return Response(ProductSerializer(product).data)


class AdminProductListView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(request=ProductSerializer, responses={201: ProductSerializer})
    def post(self, request):
        serializer = ProductSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = serializer.save()
        logger.info(f"Product created: {product.name} ({product.id})")
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)


class AdminProductDetailView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(request=ProductSerializer, responses={200: ProductSerializer})
    def patch(self, request, pk):
        product = get_object_or_404(Product, pk=pk)
        serializer = ProductSerializer(product, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        product = serializer.save()
        return Response(ProductSerializer(product).data)

    def delete(self, request, pk):
        product = get_object_or_404(Product, pk=pk)
        product.delete()
        logger.info(f"Product deleted: {pk}")
        return Response({"message": "Product deleted successfully"}, status=status.HTTP_200_OK)


# ============================================
# CHECKOUT
# ============================================

class OrderCreateView(APIView):
    """
    Place an order from a finalized cart.

    Subtotal is computed from the submitted price snapshots; shipping is
    resolved from the address country; the discount code (if any) is
    redeemed in the same transaction as the order insert. The client clears
    its cart after a 201.
    """
    permission_classes = [AllowAny]

    @extend_schema(
        request=OrderCreateSerializer,
        responses={201: OrderSerializer},
        description="Place an order",
        examples=[
            OpenApiExample(
                "Checkout with a discount code",
                value={
                    "customer_name": "Noura Al-Sabah",
                    "customer_email": "noura@example.com",
                    "items": [
                        {
                            "product_id": "5b0f8a8e-2f3c-4b9e-9d3c-1a2b3c4d5e6f",
                            "name": "Midnight Silk Slip",
                            "price": 45,
                            "quantity": 1,
                            "size": "S"
                        }
                    ],
                    "shipping_address": {
                        "name": "Noura Al-Sabah",
                        "line1": "Block 3, Street 12",
                        "city": "Kuwait City",
                        "state": "Al Asimah",
                        "postal_code": "13001",
                        "country": "KW"
                    },
                    "payment_method": "cod",
                    "discount_code": "SAVE10"
                },
                request_only=True
            ),
        ]
    )
    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        logger.info(f"Checkout request - {data['customer_email']}, {len(data['items'])} item(s)")

        order = place_order(
            customer_name=data['customer_name'],
            customer_email=data['customer_email'],
            items=data['items'],
            shipping_address=data['shipping_address'],
            payment_method=data['payment_method'],
            discount_code=data.get('discount_code'),
            notes=data.get('notes'),
            user=request.user,
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class DiscountValidateView(APIView):
    """
    Check a discount code against a subtotal without consuming a use.
    """
    permission_classes = [AllowAny]

    @extend_schema(request=DiscountValidateRequestSerializer, responses={200: DiscountQuoteSerializer})
    def post(self, request):
        serializer = DiscountValidateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        quote = resolve_discount(data['code'], data['subtotal'])
        return Response({"valid": True, **quote.to_dict()})


class ShippingCountryListView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: ShippingCountrySerializer(many=True)}, description="Active shipping destinations")
    def get(self, request):
        initialize_default_countries()
        countries = ShippingCountry.objects.filter(is_active=True).order_by('-is_default', 'name')
        return Response(ShippingCountrySerializer(countries, many=True).data)


class ShippingQuoteView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(
        parameters=[
            OpenApiParameter('country', str, description="Country code or name"),
            OpenApiParameter('subtotal', float, required=True),
        ],
        responses={200: ShippingQuoteSerializer},
        description="Shipping fee for a destination and cart subtotal"
    )
    def get(self, request):
        serializer = ShippingQuoteRequestSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        quote = resolve_shipping(data['country'], data['subtotal'])
        return Response(quote.to_dict())


# ============================================
# BACK-OFFICE: DISCOUNTS
# ============================================

class AdminDiscountListView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(responses={200: DiscountSerializer(many=True)})
    def get(self, request):
        discounts = Discount.objects.order_by('-created_at')
        return Response(DiscountSerializer(discounts, many=True).data)

    @extend_schema(request=DiscountSerializer, responses={201: DiscountSerializer})
    def post(self, request):
        serializer = DiscountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        discount = serializer.save()
        logger.info(f"Discount created: {discount.code}")
        return Response(DiscountSerializer(discount).data, status=status.HTTP_201_CREATED)


class AdminDiscountDetailView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(request=DiscountSerializer, responses={200: DiscountSerializer})
    def patch(self, request, pk):
        discount = get_object_or_404(Discount, pk=pk)
        serializer = DiscountSerializer(discount, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        discount = serializer.save()
        return Response(DiscountSerializer(discount).data)

    def delete(self, request, pk):
        discount = get_object_or_404(Discount, pk=pk)
        discount.delete()
        logger.info(f"Discount deleted: {discount.code}")
        return Response({"message": "Discount deleted successfully"}, status=status.HTTP_200_OK)


# ============================================
# BACK-OFFICE: SHIPPING COUNTRIES
# ============================================

def _save_country(serializer) -> ShippingCountry:
    """
    Save a country; a requested default goes through the transactional swap.
    """
    make_default = serializer.validated_data.pop('is_default', None)
    with transaction.atomic():
        if make_default is False:
            serializer.validated_data['is_default'] = False
        country = serializer.save()
        if make_default:
            set_default_country(country)
    return country


class AdminShippingCountryListView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(responses={200: ShippingCountrySerializer(many=True)})
    def get(self, request):
        initialize_default_countries()
        countries = ShippingCountry.objects.order_by('-is_default', 'name')
        return Response(ShippingCountrySerializer(countries, many=True).data)

    @extend_schema(request=ShippingCountrySerializer, responses={201: ShippingCountrySerializer})
    def post(self, request):
        serializer = ShippingCountrySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        country = _save_country(serializer)
        logger.info(f"Shipping country created: {country.code}")
        return Response(ShippingCountrySerializer(country).data, status=status.HTTP_201_CREATED)


class AdminShippingCountryDetailView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(request=ShippingCountrySerializer, responses={200: ShippingCountrySerializer})
    def put(self, request, pk):
        country = get_object_or_404(ShippingCountry, pk=pk)
        serializer = ShippingCountrySerializer(country, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        country = _save_country(serializer)
        return Response(ShippingCountrySerializer(country).data)

    def delete(self, request, pk):
        country = get_object_or_404(ShippingCountry, pk=pk)
        if country.is_default:
            raise BusinessRuleViolation("Cannot delete the default country", code="DEFAULT_COUNTRY_LOCKED")
        country.delete()
        logger.info(f"Shipping country deleted: {country.code}")
        return Response({"success": True}, status=status.HTTP_200_OK)


# ============================================
# BACK-OFFICE: ORDERS
# ============================================

def _positive_int(value, fallback: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return fallback
    return number if number > 0 else fallback


class AdminOrderListView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(
        parameters=[
            OpenApiParameter('status', str, description="Order status or 'all'"),
            OpenApiParameter('payment_status', str, description="Payment status or 'all'"),
            OpenApiParameter('page', int),
            OpenApiParameter('limit', int),
        ],
        responses={200: OrderSerializer(many=True)},
        description="Paginated order list, newest first"
    )
    def get(self, request):
        params = request.query_params
        orders = Order.objects.prefetch_related('items').order_by('-created_at')

        if params.get('status') and params['status'] != 'all':
            orders = orders.filter(status=params['status'])
        if params.get('payment_status') and params['payment_status'] != 'all':
            orders = orders.filter(payment_status=params['payment_status'])

        page = _positive_int(params.get('page'), 1)
        limit = min(
            _positive_int(params.get('limit'), storefront_setting('ADMIN_PAGE_SIZE')),
            storefront_setting('ADMIN_MAX_PAGE_SIZE'),
        )
        total = orders.count()
        offset = (page - 1) * limit

        return Response({
            "orders": OrderSerializer(orders[offset:offset + limit], many=True).data,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit),
            },
        })


class AdminOrderDetailView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(responses={200: OrderSerializer})
    def get(self, request, pk):
        order = get_object_or_404(Order.objects.prefetch_related('items'), pk=pk)
        return Response(OrderSerializer(order).data)

    def delete(self, request, pk):
        order = get_object_or_404(Order, pk=pk)
        order.delete()
        logger.info(f"Order deleted: {order.order_number}")
        return Response({"message": "Order deleted successfully"}, status=status.HTTP_200_OK)


class AdminOrderStatusView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(request=OrderStatusSerializer, responses={200: OrderSerializer})
    def patch(self, request, pk):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = change_status(pk, serializer.validated_data['status'])
        return Response(OrderSerializer(order).data)


class AdminOrderPaymentView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(request=PaymentStatusSerializer, responses={200: OrderSerializer})
    def patch(self, request, pk):
        serializer = PaymentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = change_payment_status(pk, serializer.validated_data['payment_status'])
        return Response(OrderSerializer(order).data)


class AdminStatsView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(description="Dashboard counters, revenue and recent records")
    def get(self, request):
        data = dashboard_stats()
        data["recent_products"] = ProductSerializer(data["recent_products"], many=True).data
        data["recent_orders"] = OrderSerializer(data["recent_orders"], many=True).data
        data["currency"] = storefront_setting('BASE_CURRENCY')
        return Response(data)


# ============================================
# SITE CONTENT
# ============================================

class ContentView(APIView):
    """
    Active storefront sections as {section: content}.
    """
    permission_classes = [AllowAny]

    @extend_schema(responses={200: {'type': 'object'}}, description="Content of every active section")
    def get(self, request):
        return Response(active_content_map())


class ContentSectionView(APIView):
    """
    Read one section publicly; admins replace it with PUT (created on first save).
    """

    def get_permissions(self):
        if self.request.method == 'PUT':
            return [IsAdminUser()]
        return [AllowAny()]

    @extend_schema(responses={200: SiteContentSerializer})
    def get(self, request, section):
        return Response(SiteContentSerializer(get_section(section)).data)

    @extend_schema(request=SiteContentUpdateSerializer, responses={200: SiteContentSerializer})
    def put(self, request, section):
        serializer = SiteContentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        item = save_section(section, data['content'], data.get('is_active'))
        return Response(SiteContentSerializer(item).data)


class AdminContentListView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(responses={200: SiteContentSerializer(many=True)}, description="All sections, active or not")
    def get(self, request):
        return Response(SiteContentSerializer(SiteContent.objects.order_by('section'), many=True).data)


# ============================================
# BACK-OFFICE: USERS
# ============================================

class AdminUserListView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(responses={200: UserSerializer(many=True)}, description="Accounts, newest first")
    def get(self, request):
        users = get_user_model().objects.order_by('-date_joined')
        return Response(UserSerializer(users, many=True).data)


class AdminUserRoleView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(request=UserRoleSerializer, responses={200: UserSerializer})
    def patch(self, request, pk):
        serializer = UserRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = get_object_or_404(get_user_model(), pk=pk)

        make_admin = serializer.validated_data['role'] == ROLE_ADMIN
        if user.pk == request.user.pk and not make_admin:
            raise BusinessRuleViolation("You cannot remove your own admin role", code="SELF_DEMOTION")

        if user.is_staff != make_admin:
            user.is_staff = make_admin
            user.save(update_fields=['is_staff'])
            logger.info(f"User {user.username} role set to {serializer.validated_data['role']}")
        return Response(UserSerializer(user).data)


class AdminUserDetailView(APIView):
    permission_classes = [IsAdminUser]

    def delete(self, request, pk):
        user = get_object_or_404(get_user_model(), pk=pk)
        if user.pk == request.user.pk:
            raise BusinessRuleViolation("You cannot delete your own account", code="SELF_DELETE")
        user.delete()
        logger.info(f"User deleted: {user.username}")
        return Response({"message": "User deleted successfully"}, status=status.HTTP_200_OK)


# ============================================
# SERVICE
# ============================================

class HealthCheckView(APIView):
    """
    System health check endpoint.

    Returns the status of the API, database connectivity and whether a
    shipping destination is configured.
    """
    permission_classes = [AllowAny]

    @extend_schema(
        responses={200: HealthCheckSerializer},
        description="Check system health status"
    )
    def get(self, request):
        """
        Check system health.
        """
        # Check database connectivity
        db_status = "healthy"
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except Exception as e:
            db_status = f"unhealthy: {str(e)}"

        shipping_status = "unknown"
        if db_status == "healthy":
            configured = ShippingCountry.objects.filter(is_active=True).exists()
            shipping_status = "configured" if configured else "not configured"

        response_data = {
            "status": "healthy" if db_status == "healthy" else "degraded",
            "version": "1.0.0",
            "database": db_status,
            "shipping": shipping_status,
            "timestamp": datetime.now(dt_timezone.utc).isoformat()
        }

        return Response(response_data, status=status.HTTP_200_OK)
