"""Cost estimate for a job draft.

The estimate is pure: it is recomputed from the catalog, the current resource
selection and the runtime every time one of those changes.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from jobflow.config import DEFAULT_PRICE_PER_HOUR
from jobflow.core.contracts import ResourceRecord
from jobflow.core.selection import SelectionSet

_CENT = Decimal("0.01")


def _is_positive_number(x: object) -> bool:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        return False
    return math.isfinite(x) and x > 0


def effective_price(resource: ResourceRecord, *, default_price: float = DEFAULT_PRICE_PER_HOUR) -> float:
    """Hourly price used for estimates; missing or zero prices fall back to ``default_price``."""
    return float(resource.price_per_hour or default_price)


def estimate_cost(
    resources: Iterable[ResourceRecord],
    selected: SelectionSet[str],
    runtime_hours: float | None,
    *,
    default_price: float = DEFAULT_PRICE_PER_HOUR,
) -> float:
    """Return the total estimated cost, rounded half-up to 2 decimals.

    Sum of ``price_per_hour * runtime_hours`` over selected resources. Selected
    ids that are not in the catalog contribute nothing. Returns ``0.0`` when
    nothing is selected or the runtime is not a positive number.
    """
    if selected.size() == 0 or not _is_positive_number(runtime_hours):
        return 0.0

    by_id = {r.id: r for r in resources}
    total = 0.0
    for rid in selected:
        resource = by_id.get(rid)
        if resource is None:
            continue
        total += effective_price(resource, default_price=default_price) * float(runtime_hours)

    return float(Decimal(str(total)).quantize(_CENT, rounding=ROUND_HALF_UP))
