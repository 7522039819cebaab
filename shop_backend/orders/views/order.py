# orders/views/order.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from orders.models import Order
from orders.serializers import (
    CheckoutCommandSerializer,
    CreateOrderCommandSerializer,
    OrderPatchCommandSerializer,
    OrderSerializer,
    RefundRequestCommandSerializer,
    ResolveRefundCommandSerializer,
    ShipCommandSerializer,
)
from orders.services import (
    OrderPatch,
    apply_order_patch,
    cancel as cancel_order,
    checkout as checkout_cart,
    complete as complete_order,
    create_order,
    create_vip_order,
    initiate_payment,
    order_stats,
    request_refund,
    resolve_refund,
    ship as ship_order,
)
from orders.services.exceptions import (
    AddressNotFound,
    EmptyCheckout,
    InsufficientStock,
    InvalidOrderPatch,
    InvalidTransition,
    OrderNotFound,
    OrderServiceError,
    ProductNotFound,
    ProductNotOnSale,
)
from payments.services import PaymentGatewayError
from products.services.exceptions import InventoryError
from users.permissions import IsAdmin
from users.services.exceptions import UserServiceError

DOMAIN_ERRORS = (
    OrderServiceError,
    InventoryError,
    UserServiceError,
    PaymentGatewayError,
    ValueError,
)


# ======================================================
# API ERROR NORMALIZATION
# ======================================================

def error_response(*, code: str, message: str, http_status: int, **details):
    """
    Canonical API error response.
    """
    body = {"code": code, "message": message}
    body.update(details)
    return Response({"error": body}, status=http_status)


def domain_error_response(exc: Exception):
    if isinstance(exc, InvalidTransition):
        return error_response(
            code="INVALID_TRANSITION",
            message=str(exc),
            http_status=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, InsufficientStock):
        return error_response(
            code="INSUFFICIENT_STOCK",
            message=str(exc),
            http_status=status.HTTP_400_BAD_REQUEST,
            product_id=str(exc.product_id),
            requested=exc.requested,
            available=exc.available,
        )

    if isinstance(exc, ProductNotOnSale):
        return error_response(
            code="PRODUCT_NOT_ON_SALE",
            message=str(exc),
            http_status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, ProductNotFound):
        return error_response(
            code="PRODUCT_NOT_FOUND",
            message=str(exc),
            http_status=status.HTTP_404_NOT_FOUND,
        )

    if isinstance(exc, AddressNotFound):
        return error_response(
            code="ADDRESS_NOT_FOUND",
            message=str(exc),
            http_status=status.HTTP_404_NOT_FOUND,
        )

    if isinstance(exc, OrderNotFound):
        return error_response(
            code="ORDER_NOT_FOUND",
            message=str(exc),
            http_status=status.HTTP_404_NOT_FOUND,
        )

    if isinstance(exc, EmptyCheckout):
        return error_response(
            code="EMPTY_CHECKOUT",
            message=str(exc),
            http_status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, InvalidOrderPatch):
        return error_response(
            code="INVALID_PATCH",
            message=str(exc),
            http_status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, PaymentGatewayError):
        return error_response(
            code="PAYMENT_GATEWAY_ERROR",
            message=str(exc),
            http_status=status.HTTP_502_BAD_GATEWAY,
        )

    return error_response(
        code="ORDER_REQUEST_INVALID",
        message=str(exc),
        http_status=status.HTTP_400_BAD_REQUEST,
    )


# ======================================================
# ORDER VIEWSET
# ======================================================

class OrderViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Orders (mini-program + admin).

    - Customers see and act on their own orders only.
    - Admins see every order and additionally ship, resolve refunds and patch.
    """

    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["status", "payment_status", "order_type"]

    ADMIN_ACTIONS = {"ship", "resolve_refund", "partial_update"}

    COMMAND_SERIALIZERS = {
        "create": CreateOrderCommandSerializer,
        "checkout": CheckoutCommandSerializer,
        "ship": ShipCommandSerializer,
        "refund": RefundRequestCommandSerializer,
        "resolve_refund": ResolveRefundCommandSerializer,
        "partial_update": OrderPatchCommandSerializer,
    }

    def get_queryset(self):
        qs = Order.objects.select_related("user").prefetch_related("items")
        user = self.request.user
        if getattr(user, "is_admin", False):
            return qs
        return qs.filter(user=user)

    def get_permissions(self):
        if self.action in self.ADMIN_ACTIONS:
            return [IsAuthenticated(), IsAdmin()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        return self.COMMAND_SERIALIZERS.get(self.action, OrderSerializer)

    def _command(self, request):
        serializer = self.get_serializer_class()(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def _order_response(self, order, http_status=status.HTTP_200_OK):
        order = Order.objects.prefetch_related("items").get(pk=order.pk)
        return Response(OrderSerializer(order).data, status=http_status)

    # --------------------------------------------------
    # CREATION
    # --------------------------------------------------

    @extend_schema(request=CreateOrderCommandSerializer, responses={201: OrderSerializer})
    def create(self, request, *args, **kwargs):
        data = self._command(request)
        try:
            order = create_order(
                user=request.user,
                lines=[dict(line) for line in data["items"]],
                address_id=data["address_id"],
                remark=data.get("remark", ""),
            )
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        return self._order_response(order, status.HTTP_201_CREATED)

    @extend_schema(request=CheckoutCommandSerializer, responses={201: OrderSerializer})
    @action(detail=False, methods=["post"], url_path="checkout")
    def checkout(self, request):
        data = self._command(request)
        try:
            order = checkout_cart(
                user=request.user,
                address_id=data["address_id"],
                remark=data.get("remark", ""),
            )
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        return self._order_response(order, status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={201: OrderSerializer})
    @action(detail=False, methods=["post"], url_path="vip")
    def vip(self, request):
        """
        Open an annual VIP membership order; pay it through /pay/.
        """
        try:
            order = create_vip_order(user=request.user)
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        return self._order_response(order, status.HTTP_201_CREATED)

    # --------------------------------------------------
    # PAYMENT
    # --------------------------------------------------

    @extend_schema(request=None, responses={200: dict})
    @action(detail=True, methods=["post"], url_path="pay")
    def pay(self, request, pk=None):
        order = self.get_object()
        try:
            params = initiate_payment(order_id=order.pk, user=request.user)
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        params.pop("raw", None)
        return Response(params, status=status.HTTP_200_OK)

    # --------------------------------------------------
    # LIFECYCLE
    # --------------------------------------------------

    @extend_schema(request=None, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        order = self.get_object()
        try:
            order = cancel_order(order_id=order.pk)
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)
        return self._order_response(order)

    @extend_schema(request=ShipCommandSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"], url_path="ship")
    def ship(self, request, pk=None):
        order = self.get_object()
        data = self._command(request)
        try:
            order = ship_order(
                order_id=order.pk,
                tracking_no=data.get("tracking_no", ""),
                tracking_company=data.get("tracking_company", ""),
            )
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)
        return self._order_response(order)

    @extend_schema(request=None, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"], url_path="complete")
    def complete(self, request, pk=None):
        order = self.get_object()
        try:
            order = complete_order(order_id=order.pk)
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)
        return self._order_response(order)

    # --------------------------------------------------
    # REFUNDS
    # --------------------------------------------------

    @extend_schema(request=RefundRequestCommandSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"], url_path="refund")
    def refund(self, request, pk=None):
        order = self.get_object()
        data = self._command(request)
        try:
            order = request_refund(order_id=order.pk, reason=data.get("reason", ""))
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)
        return self._order_response(order)

    @extend_schema(request=ResolveRefundCommandSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"], url_path="resolve-refund")
    def resolve_refund(self, request, pk=None):
        order = self.get_object()
        data = self._command(request)
        try:
            order = resolve_refund(
                order_id=order.pk,
                decision=data["decision"],
                remark=data.get("remark", ""),
            )
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)
        return self._order_response(order)

    # --------------------------------------------------
    # ADMIN PATCH
    # --------------------------------------------------

    @extend_schema(request=OrderPatchCommandSerializer, responses={200: OrderSerializer})
    def partial_update(self, request, *args, **kwargs):
        order = self.get_object()
        data = self._command(request)
        try:
            order = apply_order_patch(order_id=order.pk, patch=OrderPatch.from_mapping(data))
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)
        return self._order_response(order)

    # --------------------------------------------------
    # STATS
    # --------------------------------------------------

    @extend_schema(responses={200: dict})
    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request):
        return Response(order_stats(user=request.user), status=status.HTTP_200_OK)
