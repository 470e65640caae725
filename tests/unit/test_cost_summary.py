"""Unit tests for cost estimate totals."""

from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from src.marketplace.models import CostCategory, CostEstimate
from src.marketplace.services.ledger_service import summarize_costs

pytestmark = pytest.mark.unit

amounts = st.decimals(min_value=0, max_value=1_000_000, places=2, allow_nan=False)


def _estimate(category: CostCategory, estimated: str, actual: str | None = None) -> CostEstimate:
    return CostEstimate(
        category=category.value,
        description="line",
        estimated_amount=Decimal(estimated),
        actual_amount=Decimal(actual) if actual is not None else None,
    )


def test_empty_summary_has_every_category():
    summary = summarize_costs([])

    assert summary.total_estimated == Decimal("0")
    assert summary.total_actual == Decimal("0")
    assert set(summary.by_category) == set(CostCategory)


def test_missing_actuals_count_as_zero():
    summary = summarize_costs(
        [
            _estimate(CostCategory.LABOR, "100.00", "90.00"),
            _estimate(CostCategory.LABOR, "50.00"),
            _estimate(CostCategory.MATERIALS, "25.50", "30.00"),
        ]
    )

    assert summary.total_estimated == Decimal("175.50")
    assert summary.total_actual == Decimal("120.00")
    assert summary.by_category[CostCategory.LABOR].estimated == Decimal("150.00")
    assert summary.by_category[CostCategory.LABOR].actual == Decimal("90.00")


@given(rows=st.lists(st.tuples(st.sampled_from(list(CostCategory)), amounts), max_size=20))
def test_category_totals_add_up(rows):
    estimates = [
        CostEstimate(category=c.value, description="line", estimated_amount=a) for c, a in rows
    ]

    summary = summarize_costs(estimates)

    assert summary.total_estimated == sum(
        (t.estimated for t in summary.by_category.values()), Decimal("0")
    )
