"""
API URL Configuration
"""
from django.urls import path
from .views import (
    AdminDiscountDetailView,
    AdminContentListView,
    AdminDiscountListView,
    AdminOrderDetailView,
    AdminOrderListView,
    AdminOrderPaymentView,
    AdminOrderStatusView,
    AdminProductDetailView,
    AdminProductListView,
    AdminShippingCountryDetailView,
    AdminShippingCountryListView,
    AdminStatsView,
    AdminUserDetailView,
    AdminUserListView,
    AdminUserRoleView,
    ContentSectionView,
    ContentView,
    DiscountValidateView,
    FeaturedProductsView,
    HealthCheckView,
    OrderCreateView,
    ProductBrandsView,
    ProductCategoriesView,
    ProductDetailView,
    ProductListView,
    ShippingCountryListView,
    ShippingQuoteView,
)

app_name = 'api'

urlpatterns = [
    # Catalog
    path('products/', ProductListView.as_view(), name='product-list'),
    path('products/featured/', FeaturedProductsView.as_view(), name='product-featured'),
    path('products/categories/', ProductCategoriesView.as_view(), name='product-categories'),
    path('products/brands/', ProductBrandsView.as_view(), name='product-brands'),
    path('products/<uuid:pk>/', ProductDetailView.as_view(), name='product-detail'),

    # Checkout
    path('orders/', OrderCreateView.as_view(), name='order-create'),
    path('discounts/validate/', DiscountValidateView.as_view(), name='discount-validate'),
    path('shipping/countries/', ShippingCountryListView.as_view(), name='shipping-countries'),
    path('shipping/quote/', ShippingQuoteView.as_view(), name='shipping-quote'),

    # Site content
    path('content/', ContentView.as_view(), name='content'),
    path('content/<str:section>/', ContentSectionView.as_view(), name='content-section'),

    # Back-office
    path('admin/products/', AdminProductListView.as_view(), name='admin-product-list'),
    path('admin/products/<uuid:pk>/', AdminProductDetailView.as_view(), name='admin-product-detail'),
    path('admin/discounts/', AdminDiscountListView.as_view(), name='admin-discount-list'),
    path('admin/discounts/<uuid:pk>/', AdminDiscountDetailView.as_view(), name='admin-discount-detail'),
    path('admin/shipping/countries/', AdminShippingCountryListView.as_view(), name='admin-shipping-country-list'),
    path(
        'admin/shipping/countries/<uuid:pk>/',
        AdminShippingCountryDetailView.as_view(),
        name='admin-shipping-country-detail'
    ),
    path('admin/orders/', AdminOrderListView.as_view(), name='admin-order-list'),
    path('admin/orders/<uuid:pk>/', AdminOrderDetailView.as_view(), name='admin-order-detail'),
    path('admin/orders/<uuid:pk>/status/', AdminOrderStatusView.as_view(), name='admin-order-status'),
    path('admin/orders/<uuid:pk>/payment/', AdminOrderPaymentView.as_view(), name='admin-order-payment'),
    path('admin/stats/', AdminStatsView.as_view(), name='admin-stats'),
    path('admin/content/', AdminContentListView.as_view(), name='admin-content-list'),
    path('admin/users/', AdminUserListView.as_view(), name='admin-user-list'),
    path('admin/users/<int:pk>/', AdminUserDetailView.as_view(), name='admin-user-detail'),
    path('admin/users/<int:pk>/role/', AdminUserRoleView.as_view(), name='admin-user-role'),

    # Health check
    path('health/', HealthCheckView.as_view(), name='health'),
]
