from django.urls import path, include

urlpatterns = [
    path("shopping-cart/", include("apps.carts.urls")),
]
