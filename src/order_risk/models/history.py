"""
Customer history models consumed by the scoring engine.

Upstream systems have written the same status under several spellings over
time (``Cancelled``, ``canceled``, ``OrderStatus.cancelled``...). Each field
accepts a small fixed set of those spellings and resolves them to one
canonical enum member before any comparison happens. Anything outside the
set is rejected as malformed input.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from pydantic import AliasChoices, Field, field_validator, model_validator

from order_risk.models.base import CamelModel


class OrderStatus(str, Enum):
    """Order lifecycle states."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    PROCESSED = "processed"
    SHIPPED = "shipped"
    OUT_FOR_DELIVERY = "outForDelivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class PaymentStatus(str, Enum):
    """Payment states recorded against an order."""

    PAID = "paid"
    PENDING = "pending"
    FAILED = "failed"
    REFUNDED = "refunded"


def _spelling_table(
    enum_cls: Type[Enum], prefix: str, extra: Dict[str, Enum]
) -> Dict[str, Enum]:
    """Map every accepted spelling of each member to the member."""
    table: Dict[str, Enum] = {}
    for member in enum_cls:
        value = member.value
        for spelling in (value, value[0].upper() + value[1:], f"{prefix}.{value}"):
            table[spelling] = member
    table.update(extra)
    return table


ORDER_STATUS_SPELLINGS = _spelling_table(
    OrderStatus, "OrderStatus", {"canceled": OrderStatus.CANCELLED}
)
PAYMENT_STATUS_SPELLINGS = _spelling_table(PaymentStatus, "PaymentStatus", {})

# Matched case-sensitively; "Order Cancellation" and friends are not returns.
RETURN_ISSUE_TYPES = frozenset({"Order Return", "Return", "return"})


def _resolve(value: Any, enum_cls: Type[Enum], table: Dict[str, Enum], label: str) -> Enum:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str) and value in table:
        return table[value]
    raise ValueError(f"Unrecognised {label}: {value!r}")


class Order(CamelModel):
    """One purchase transaction."""

    order_id: str = Field(validation_alias=AliasChoices("orderId", "order_id", "id"))
    total_amount: float = Field(allow_inf_nan=False)
    status: OrderStatus
    payment_status: Optional[PaymentStatus] = None
    order_date: datetime
    shipping_address: Optional[Union[str, Dict[str, Any]]] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value: Any) -> OrderStatus:
        return _resolve(value, OrderStatus, ORDER_STATUS_SPELLINGS, "order status")

    @field_validator("payment_status", mode="before")
    @classmethod
    def normalize_payment_status(cls, value: Any) -> Optional[PaymentStatus]:
        if value is None:
            return None
        return _resolve(value, PaymentStatus, PAYMENT_STATUS_SPELLINGS, "payment status")

    @field_validator("total_amount", mode="before")
    @classmethod
    def reject_boolean_total(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("total_amount must be numeric")
        return value

    @property
    def is_cancelled(self) -> bool:
        return self.status is OrderStatus.CANCELLED

    @property
    def payment_failed(self) -> bool:
        return self.payment_status is PaymentStatus.FAILED


class Issue(CamelModel):
    """Support ticket raised by the customer, loosely tied to an order."""

    issue_id: str = Field(validation_alias=AliasChoices("issueId", "issue_id", "id"))
    issue_type: str
    status: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_return(self) -> bool:
        return self.issue_type in RETURN_ISSUE_TYPES


class CustomerHistory(CamelModel):
    """
    Everything the engine needs about one customer.

    ``analytics`` is carried for context only and never read by scoring.
    """

    active_orders: List[Order] = Field(
        default_factory=list,
        validation_alias=AliasChoices("activeOrders", "active_orders", "orders"),
    )
    delivered_orders: List[Order] = Field(
        default_factory=list,
        validation_alias=AliasChoices("deliveredOrders", "delivered_orders"),
    )
    issues: List[Issue] = Field(default_factory=list)
    analytics: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("active_orders", "delivered_orders", "issues", mode="before")
    @classmethod
    def default_missing_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("analytics", mode="before")
    @classmethod
    def default_missing_analytics(cls, value: Any) -> Any:
        return {} if value is None else value

    @model_validator(mode="after")
    def check_timestamp_awareness(self) -> "CustomerHistory":
        """
        Active orders are sorted by date, so they must agree on awareness.

        Delivered orders are only read for their hour and may differ.
        """
        kinds = {order.order_date.utcoffset() is not None for order in self.active_orders}
        if len(kinds) > 1:
            raise ValueError("active order dates mix timezone-aware and naive timestamps")
        return self

    @property
    def all_orders(self) -> Tuple[Order, ...]:
        return tuple(self.active_orders) + tuple(self.delivered_orders)
