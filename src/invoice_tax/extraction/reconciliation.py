"""Reconcile a per-rate IVA breakdown against the declared tax total.

Summary totals and independently sourced per-rate entries often disagree by
a few cents of rounding, and occasionally by construction errors in the
document. Reports need the per-rate figures to add up to the declared total
exactly, so the breakdown is scaled proportionally and the rounding residual
is pushed onto the largest bucket.
"""
from __future__ import annotations

import structlog

from ..models.invoice import ReconciliationInfo
from ..utils.numbers import round2, to_number

logger = structlog.get_logger(__name__)


def reconcile_breakdown(
    breakdown: dict[float, float], expected_total,
) -> tuple[dict[float, float], ReconciliationInfo]:
    """Force the non-zero-rate amounts of *breakdown* to sum to *expected_total*.

    Rules, all at 2-decimal half-up rounding:
    1. 0% entries never take part in the sum. When the breakdown is adjusted,
       a 0% entry carrying a non-zero amount is dropped so the result still
       sums to the target.
    2. Already matching (or nothing to adjust) -> unchanged.
    3. Non-positive sum against a non-zero target -> unchanged, with the
       unresolved difference recorded in ``diff_applied``.
    4. Otherwise scale every entry by target / sum. All entries but the
       largest (by absolute amount, ties to the earlier entry) are rounded as
       scaled; the largest takes round(target) minus their total.
    """
    expected = to_number(expected_total)
    entries = [(rate, to_number(amount)) for rate, amount in breakdown.items() if rate != 0]
    total = sum(amount for _, amount in entries)
    total_r = round2(total)
    expected_r = round2(expected)
    no_breakdown = not entries
    unchanged = dict(breakdown)

    if expected_r == 0 and total_r == 0:
        return unchanged, ReconciliationInfo(no_breakdown=no_breakdown)

    if total_r == expected_r or not entries:
        return unchanged, ReconciliationInfo(no_breakdown=no_breakdown)

    diff = round2(expected_r - total_r)
    if total <= 0:
        logger.info("breakdown_not_scalable", total=total_r, expected=expected_r)
        return unchanged, ReconciliationInfo(diff_applied=diff)

    scale = expected / total
    ordered = sorted(entries, key=lambda item: abs(item[1]), reverse=True)
    largest_rate = ordered[0][0]

    adjusted: dict[float, float] = {}
    running = 0.0
    for rate, amount in ordered[1:]:
        value = round2(amount * scale)
        adjusted[rate] = value
        running += value
    adjusted[largest_rate] = round2(expected_r - running)

    # A 0% bucket only survives when it holds no amount
    result = {rate: amount for rate, amount in breakdown.items() if rate == 0 and round2(amount) == 0}
    for rate, _ in entries:
        result[rate] = adjusted[rate]

    logger.debug("breakdown_adjusted", rate=largest_rate, diff=diff)
    return result, ReconciliationInfo(adjusted=True, diff_applied=diff, adjusted_rate=largest_rate)
