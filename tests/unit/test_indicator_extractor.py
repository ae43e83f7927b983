"""Tests for history normalization and indicator extraction."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from order_risk.models.history import CustomerHistory, Issue, Order
from order_risk.services.history_normalizer import normalize_history
from order_risk.services.indicator_extractor import extract_indicators

BASE = datetime(2024, 6, 10, 14, 0)


def _order(n: int, status: str = "delivered", **kwargs) -> Order:
    return Order(
        order_id=f"ORD-{n}",
        total_amount=kwargs.pop("total_amount", 500),
        status=status,
        order_date=kwargs.pop("order_date", BASE - timedelta(days=n * 7)),
        **kwargs,
    )


def _issue(n: int, issue_type: str = "Product Quality") -> Issue:
    return Issue(issue_id=f"ISS-{n}", issue_type=issue_type, status="Open")


def _extract(**history_kwargs):
    normalized = normalize_history(CustomerHistory(**history_kwargs))
    return extract_indicators(normalized)


class TestNormalizeHistory:
    """Test the first pipeline stage."""

    def test_missing_collections_default_to_empty(self):
        normalized = normalize_history({})
        assert normalized.total_orders == 0
        assert normalized.is_empty
        assert normalized.issues == ()

    def test_total_counts_both_pools(self):
        normalized = normalize_history(
            CustomerHistory(
                active_orders=[_order(1, "pending")],
                delivered_orders=[_order(2), _order(3)],
            )
        )
        assert normalized.total_orders == 3
        assert len(normalized.all_orders) == 3

    def test_raw_mapping_is_validated(self):
        normalized = normalize_history(
            {"deliveredOrders": [{"id": "A", "totalAmount": 10, "status": "Delivered",
                                  "orderDate": "2024-01-01T09:00:00"}]}
        )
        assert normalized.total_orders == 1

    def test_input_not_mutated(self):
        history = CustomerHistory(active_orders=[_order(2, "pending"), _order(1, "pending")])
        before = history.model_dump()
        normalize_history(history)
        assert history.model_dump() == before


class TestRateIndicators:
    """Cancellation, return and issue rates."""

    def test_cancel_rate_counts_active_pool_only(self):
        result = _extract(
            active_orders=[_order(1, "cancelled"), _order(2, "pending")],
            delivered_orders=[_order(3), _order(4)],
        )
        assert result.indicators.cancel_rate == 25.0
        assert result.cancelled_count == 1

    def test_whole_percentages_are_exact(self):
        active = [_order(i, "cancelled") for i in range(6)] + [
            _order(i, "pending") for i in range(6, 10)
        ]
        result = _extract(active_orders=active)
        assert result.indicators.cancel_rate == 60.0

    def test_return_and_issue_rates(self):
        result = _extract(
            delivered_orders=[_order(i) for i in range(4)],
            issues=[_issue(1, "Order Return"), _issue(2, "return"), _issue(3)],
        )
        assert result.indicators.return_rate == 50.0
        assert result.indicators.issue_rate == 75.0
        assert result.return_issue_count == 2

    def test_empty_history_refused(self):
        with pytest.raises(ValueError):
            extract_indicators(normalize_history({}))


class TestHighValueCancellations:
    """Cancelled active orders above 5000."""

    def test_threshold_is_exclusive(self):
        result = _extract(
            active_orders=[
                _order(1, "cancelled", total_amount=5000),
                _order(2, "cancelled", total_amount=5000.01),
                _order(3, "Cancelled", total_amount=9000),
                _order(4, "pending", total_amount=9000),
            ]
        )
        assert result.indicators.high_value_cancellations == 2


class TestRapidOrderPattern:
    """Three newest active orders inside 24 hours."""

    def _three(self, span: timedelta):
        newest = BASE
        return [
            _order(1, "pending", order_date=newest - span),
            _order(2, "pending", order_date=newest),
            _order(3, "pending", order_date=newest - span / 2),
        ]

    def test_just_under_a_day_triggers(self):
        result = _extract(active_orders=self._three(timedelta(hours=23, minutes=59)))
        assert result.indicators.rapid_order_pattern == 1

    def test_exactly_a_day_does_not_trigger(self):
        result = _extract(active_orders=self._three(timedelta(hours=24)))
        assert result.indicators.rapid_order_pattern == 0

    def test_fewer_than_three_active_never_triggers(self):
        result = _extract(
            active_orders=[_order(1, "pending", order_date=BASE),
                           _order(2, "pending", order_date=BASE)],
            delivered_orders=[_order(3, order_date=BASE)],
        )
        assert result.indicators.rapid_order_pattern == 0

    def test_only_three_newest_considered(self):
        """An old fourth order does not break a rapid burst."""
        orders = self._three(timedelta(hours=2)) + [
            _order(4, "pending", order_date=BASE - timedelta(days=90))
        ]
        result = _extract(active_orders=orders)
        assert result.indicators.rapid_order_pattern == 1


class TestAddressChanges:
    """Distinct shipping addresses, suppressed for long histories."""

    def test_more_than_three_addresses_recorded(self):
        orders = [_order(i, shipping_address=f"{i} Lane") for i in range(4)]
        result = _extract(delivered_orders=orders)
        assert result.indicators.address_changes == 4

    def test_three_addresses_not_recorded(self):
        orders = [_order(i, shipping_address=f"{i} Lane") for i in range(3)]
        result = _extract(delivered_orders=orders)
        assert result.indicators.address_changes == 0

    def test_suppressed_for_ten_or_more_orders(self):
        orders = [_order(i, shipping_address=f"{i % 5} Lane") for i in range(12)]
        result = _extract(delivered_orders=orders)
        assert result.indicators.address_changes == 0

    def test_structured_addresses_compare_by_content(self):
        orders = [
            _order(1, shipping_address={"city": "Pune", "line1": "A"}),
            _order(2, shipping_address={"line1": "A", "city": "Pune"}),
            _order(3, shipping_address="B"),
            _order(4, shipping_address="C"),
            _order(5, shipping_address="D"),
        ]
        result = _extract(delivered_orders=orders)
        assert result.indicators.address_changes == 4

    def test_empty_mapping_counts_as_an_address(self):
        orders = [
            _order(1, shipping_address={}),
            _order(2, shipping_address="B"),
            _order(3, shipping_address="C"),
            _order(4, shipping_address="D"),
        ]
        result = _extract(delivered_orders=orders)
        assert result.indicators.address_changes == 4

    def test_missing_addresses_ignored(self):
        orders = [_order(i, shipping_address=None) for i in range(3)] + [
            _order(i, shipping_address="") for i in range(3, 6)
        ]
        result = _extract(delivered_orders=orders)
        assert result.indicators.address_changes == 0


class TestPaymentFailures:
    def test_counts_failed_active_orders(self):
        result = _extract(
            active_orders=[
                _order(1, "pending", payment_status="failed"),
                _order(2, "pending", payment_status="PaymentStatus.failed"),
                _order(3, "pending", payment_status="paid"),
            ],
            delivered_orders=[_order(4, payment_status="failed")],
        )
        assert result.indicators.payment_failures == 2


class TestSuspiciousTimePattern:
    """More than half of all orders between midnight and 5am."""

    def test_majority_late_night_triggers(self):
        orders = [
            _order(1, order_date=datetime(2024, 1, 1, 0, 30)),
            _order(2, order_date=datetime(2024, 1, 2, 4, 59)),
            _order(3, order_date=datetime(2024, 1, 3, 15, 0)),
        ]
        result = _extract(delivered_orders=orders)
        assert result.indicators.suspicious_time_pattern == 1

    def test_exactly_half_does_not_trigger(self):
        orders = [
            _order(1, order_date=datetime(2024, 1, 1, 1, 0)),
            _order(2, order_date=datetime(2024, 1, 2, 5, 0)),
        ]
        result = _extract(delivered_orders=orders)
        assert result.indicators.suspicious_time_pattern == 0

    def test_configured_zone_used_for_aware_timestamps(self):
        """21:30 UTC is 03:00 in Kolkata."""
        orders = [
            _order(i, order_date=datetime(2024, 1, i + 1, 21, 30, tzinfo=timezone.utc))
            for i in range(3)
        ]
        normalized = normalize_history(CustomerHistory(delivered_orders=orders))
        assert extract_indicators(normalized).indicators.suspicious_time_pattern == 0
        in_kolkata = extract_indicators(normalized, tz=ZoneInfo("Asia/Kolkata"))
        assert in_kolkata.indicators.suspicious_time_pattern == 1
