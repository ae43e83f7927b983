"""
Second pipeline stage: derive the eight behavioral indicators.

Each indicator is computed on its own; none reads another's result.
Rate indicators are percentages of the total order count, which the caller
guarantees is non-zero.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Any, Iterable, Optional, Sequence

from order_risk.models.assessment import FraudIndicators
from order_risk.models.history import Order
from order_risk.services.history_normalizer import NormalizedHistory

HIGH_VALUE_THRESHOLD = 5000
RAPID_ORDER_SAMPLE = 3
RAPID_ORDER_WINDOW = timedelta(hours=24)
ADDRESS_CARDINALITY_THRESHOLD = 3
ADDRESS_HISTORY_CUTOFF = 10
LATE_NIGHT_START_HOUR = 0
LATE_NIGHT_END_HOUR = 5


@dataclass(frozen=True)
class IndicatorExtraction:
    """Indicators plus the raw counts reported alongside the score."""

    indicators: FraudIndicators
    cancelled_count: int
    return_issue_count: int


def extract_indicators(
    history: NormalizedHistory, tz: Optional[tzinfo] = None
) -> IndicatorExtraction:
    """Compute all indicators for a non-empty history."""
    total = history.total_orders
    if total <= 0:
        raise ValueError("indicators require at least one order")

    cancelled = [o for o in history.active_orders if o.is_cancelled]
    return_issues = [i for i in history.issues if i.is_return]

    indicators = FraudIndicators(
        cancel_rate=_rate(len(cancelled), total),
        return_rate=_rate(len(return_issues), total),
        issue_rate=_rate(len(history.issues), total),
        high_value_cancellations=sum(
            1 for o in cancelled if o.total_amount > HIGH_VALUE_THRESHOLD
        ),
        rapid_order_pattern=_rapid_order_pattern(history.active_orders),
        address_changes=_address_changes(history.all_orders, total),
        payment_failures=sum(1 for o in history.active_orders if o.payment_failed),
        suspicious_time_pattern=_suspicious_time_pattern(history.all_orders, total, tz),
    )
    return IndicatorExtraction(
        indicators=indicators,
        cancelled_count=len(cancelled),
        return_issue_count=len(return_issues),
    )


def _rate(count: int, total: int) -> float:
    # count * 100 first keeps whole percentages exact (6 of 10 -> 60.0).
    return count * 100.0 / total


def _rapid_order_pattern(active_orders: Sequence[Order]) -> int:
    """1 when the three newest active orders span less than 24 hours."""
    if len(active_orders) < RAPID_ORDER_SAMPLE:
        return 0
    newest = sorted(active_orders, key=lambda o: o.order_date, reverse=True)
    span = newest[0].order_date - newest[RAPID_ORDER_SAMPLE - 1].order_date
    return 1 if span < RAPID_ORDER_WINDOW else 0


def _address_key(address: Any) -> Optional[str]:
    # Missing and blank addresses are skipped; an empty mapping still counts.
    if address is None or address == "":
        return None
    if isinstance(address, str):
        return address
    return json.dumps(address, sort_keys=True, default=str)


def _address_changes(orders: Iterable[Order], total: int) -> int:
    """Distinct shipping addresses, suppressed for long order histories."""
    addresses = {_address_key(o.shipping_address) for o in orders}
    addresses.discard(None)
    if len(addresses) > ADDRESS_CARDINALITY_THRESHOLD and total < ADDRESS_HISTORY_CUTOFF:
        return len(addresses)
    return 0


def _local_hour(moment: datetime, tz: Optional[tzinfo]) -> int:
    if tz is not None and moment.utcoffset() is not None:
        moment = moment.astimezone(tz)
    return moment.hour


def _suspicious_time_pattern(
    orders: Iterable[Order], total: int, tz: Optional[tzinfo]
) -> int:
    """1 when more than half of all orders were placed between midnight and 5am."""
    late_night = sum(
        1
        for o in orders
        if LATE_NIGHT_START_HOUR <= _local_hour(o.order_date, tz) < LATE_NIGHT_END_HOUR
    )
    return 1 if late_night > total * 0.5 else 0
