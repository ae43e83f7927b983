"""First pipeline stage: default missing collections and count orders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Tuple, Union

from order_risk.models.history import CustomerHistory, Issue, Order


@dataclass(frozen=True)
class NormalizedHistory:
    """Read-only view of a customer history with the order denominator."""

    active_orders: Tuple[Order, ...]
    delivered_orders: Tuple[Order, ...]
    issues: Tuple[Issue, ...]
    total_orders: int

    @property
    def all_orders(self) -> Tuple[Order, ...]:
        return self.active_orders + self.delivered_orders

    @property
    def is_empty(self) -> bool:
        return self.total_orders == 0


def normalize_history(
    history: Union[CustomerHistory, Mapping[str, Any]]
) -> NormalizedHistory:
    """
    Build the normalized view every later stage reads from.

    Raw mappings are validated into a CustomerHistory first, so absent or null
    lists become empty and malformed records raise pydantic's ValidationError.
    """
    if not isinstance(history, CustomerHistory):
        history = CustomerHistory.model_validate(history)

    active = tuple(history.active_orders)
    delivered = tuple(history.delivered_orders)
    return NormalizedHistory(
        active_orders=active,
        delivered_orders=delivered,
        issues=tuple(history.issues),
        total_orders=len(active) + len(delivered),
    )
