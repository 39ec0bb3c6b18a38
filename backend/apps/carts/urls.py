from django.urls import path

from .views import (
    CartBatchView,
    CartClearView,
    CartCountView,
    CartItemDetailView,
    CartListView,
    CartValidateView,
)

urlpatterns = [
    path("", CartListView.as_view(), name="api-cart-list"),
    path("count/", CartCountView.as_view(), name="api-cart-count"),
    path("batch/", CartBatchView.as_view(), name="api-cart-batch"),
    path("validate/", CartValidateView.as_view(), name="api-cart-validate"),
    path("clear/", CartClearView.as_view(), name="api-cart-clear"),
    path("<int:cart_id>/", CartItemDetailView.as_view(), name="api-cart-detail"),
]
