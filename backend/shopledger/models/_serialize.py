from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

CENTS = Decimal("0.01")


def money(value: Optional[Decimal]) -> Optional[float]:
    """
    Numeric(10, 2) -> JSON number.

    Rounded to cents first; SQLite keeps NUMERIC as REAL, so running
    balances can come back as e.g. 150.2999999999. At ten significant
    digits the float repr round-trips exactly.
    """
    if value is None:
        return None
    return float(Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP))
