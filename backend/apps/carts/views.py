from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response
from apps.common import get_logger
from .commands import parse_checked
from .container import build_cart_service
from .serializers import (
    AddToCartSerializer,
    BatchCartSerializer,
    BatchResultSerializer,
    CartClearResultSerializer,
    CartCountSerializer,
    CartItemReadSerializer,
    CartListSerializer,
    CartValidationSerializer,
    UpdateCartItemSerializer,
    ValidateCartSerializer,
)

logger = get_logger(__name__).bind(component="carts", layer="view")

ERROR_RESPONSES = {
    400: OpenApiResponse(response=ErrorResponseSerializer),
    401: OpenApiResponse(response=ErrorResponseSerializer),
}
STOCK_CONFLICT = {409: OpenApiResponse(response=ErrorResponseSerializer)}
NOT_FOUND = {404: OpenApiResponse(response=ErrorResponseSerializer)}


class CartListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartListView")

    @extend_schema(
        summary="List cart items",
        description=(
            "Returns one page of the caller's cart lines hydrated with live SKU data, "
            "together with statistics and a validation report for the whole cart."
        ),
        parameters=[
            OpenApiParameter("page", int, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("size", int, OpenApiParameter.QUERY, required=False),
            OpenApiParameter(
                "checked",
                int,
                OpenApiParameter.QUERY,
                required=False,
                description="1 for checked lines only, 0 for unchecked lines only",
            ),
            OpenApiParameter("skuId", int, OpenApiParameter.QUERY, required=False),
        ],
        responses={200: CartListSerializer, **ERROR_RESPONSES},
    )
    def get(self, request):
        dto = self.service.list_cart(request.user.id, request.query_params.dict())
        return Response(CartListSerializer(dto).data)

    @extend_schema(
        summary="Add to cart",
        description=(
            "Adds a SKU to the caller's cart. If the SKU is already in the cart the "
            "quantities are merged and the merged total is checked against stock."
        ),
        request=AddToCartSerializer,
        responses={201: CartItemReadSerializer, **ERROR_RESPONSES, **STOCK_CONFLICT},
    )
    def post(self, request):
        serializer = AddToCartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        dto = self.service.add_to_cart(request.user.id, data["skuId"], data["quantity"])
        self.log.info(
            "Cart line added via API",
            cart_id=dto.id,
            user_id=request.user.id,
            sku_id=dto.sku_id,
            quantity=dto.quantity,
        )
        return Response(CartItemReadSerializer(dto).data, status=status.HTTP_201_CREATED)


class CartCountView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()

    @extend_schema(
        summary="Cart item count",
        description="Sum of quantities across the caller's cart lines (badge count).",
        responses={200: CartCountSerializer},
    )
    def get(self, request):
        count = self.service.get_cart_count(request.user.id)
        return Response(CartCountSerializer({"count": count}).data)


class CartBatchView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartBatchView")

    @extend_schema(
        summary="Batch cart operation",
        description=(
            "Applies delete, check or uncheck to each listed line independently. "
            "Failures are reported per id and never abort the batch."
        ),
        request=BatchCartSerializer,
        responses={200: BatchResultSerializer, **ERROR_RESPONSES},
    )
    def post(self, request):
        serializer = BatchCartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = self.service.batch_operate(data["ids"], data["action"], user_id=request.user.id)
        self.log.info(
            "Batch processed via API",
            user_id=request.user.id,
            action=data["action"],
            success=result.success,
            failed=result.failed,
        )
        return Response(BatchResultSerializer(result).data)


class CartValidateView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()

    @extend_schema(
        summary="Validate cart",
        description=(
            "Checks the caller's cart (or only the given lines) against live catalog "
            "state. Ids that are not in the caller's cart are ignored."
        ),
        request=ValidateCartSerializer,
        responses={200: CartValidationSerializer, **ERROR_RESPONSES},
    )
    def post(self, request):
        serializer = ValidateCartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = self.service.validate_cart(
            request.user.id, serializer.validated_data.get("cartIds")
        )
        return Response(CartValidationSerializer(report).data)


class CartClearView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartClearView")

    @extend_schema(
        summary="Clear cart",
        parameters=[
            OpenApiParameter(
                "checkedOnly",
                bool,
                OpenApiParameter.QUERY,
                required=False,
                description="Remove only checked lines",
            )
        ],
        responses={200: CartClearResultSerializer, **ERROR_RESPONSES},
    )
    def delete(self, request):
        raw = request.query_params.get("checkedOnly")
        checked_only = parse_checked(raw) if raw not in (None, "") else False
        removed = self.service.clear_cart(request.user.id, checked_only=checked_only)
        self.log.info(
            "Cart cleared via API",
            user_id=request.user.id,
            checked_only=checked_only,
            removed=removed,
        )
        return Response(CartClearResultSerializer({"removed": removed}).data)


class CartItemDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemDetailView")

    @extend_schema(
        summary="Get cart item",
        parameters=[OpenApiParameter("cart_id", int, OpenApiParameter.PATH)],
        responses={200: CartItemReadSerializer, **NOT_FOUND},
    )
    def get(self, request, cart_id: int):
        dto = self.service.get_cart_item(cart_id, user_id=request.user.id)
        return Response(CartItemReadSerializer(dto).data)

    @extend_schema(
        summary="Update cart item",
        description=(
            "Replaces the quantity and/or sets the checked flag. A new quantity must "
            "not exceed live stock and the SKU must still exist; offline flags are "
            "reported by the validate endpoint instead."
        ),
        parameters=[OpenApiParameter("cart_id", int, OpenApiParameter.PATH)],
        request=UpdateCartItemSerializer,
        responses={200: CartItemReadSerializer, **ERROR_RESPONSES, **NOT_FOUND, **STOCK_CONFLICT},
    )
    def put(self, request, cart_id: int):
        serializer = UpdateCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = self.service.update_cart_item(
            cart_id, dict(serializer.validated_data), user_id=request.user.id
        )
        self.log.info(
            "Cart item updated via API",
            cart_id=cart_id,
            user_id=request.user.id,
            quantity=dto.quantity,
            checked=dto.checked,
        )
        return Response(CartItemReadSerializer(dto).data)

    @extend_schema(
        summary="Delete cart item",
        parameters=[OpenApiParameter("cart_id", int, OpenApiParameter.PATH)],
        responses={204: None, **NOT_FOUND},
    )
    def delete(self, request, cart_id: int):
        if not self.service.delete_cart_item(cart_id, user_id=request.user.id):
            return error_response("NOT_FOUND", "Cart item not found", {"id": str(cart_id)})
        self.log.info("Cart item deleted via API", cart_id=cart_id, user_id=request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)
