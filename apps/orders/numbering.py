"""
Sequential, year-scoped order numbers: NNNN/YY.
DO and SDO keep independent sequences; SDO numbers carry an "SDO-" prefix so the
two never collide.
"""

import re
from typing import Optional

from django.db.models import Max
from django.utils import timezone

from .models import DeliveryOrder

ORDER_NUMBER_PATTERN = re.compile(r"^(?:SDO-)?(\d{1,6})/(\d{2})$")

_PREFIX = {
    DeliveryOrder.Kind.DO:  "",
    DeliveryOrder.Kind.SDO: "SDO-",
}


def format_order_number(kind, sn: int, year: int) -> str:
    return f"{_PREFIX[kind]}{sn:04d}/{year % 100:02d}"


def parse_serial(order_number: str) -> Optional[int]:
    match = ORDER_NUMBER_PATTERN.match((order_number or "").strip())
    return int(match.group(1)) if match else None


def next_serial(kind, year: int) -> int:
    current = (
        DeliveryOrder.objects
        .filter(order_kind=kind, order_date__year=year)
        .aggregate(top=Max("sn"))["top"]
    )
    return (current or 0) + 1


def next_order_number(kind=DeliveryOrder.Kind.DO, year=None):
    """Returns (sn, order_number) for the next order of this kind in the given year."""
    year = year or timezone.localdate().year
    sn = next_serial(kind, year)
    return sn, format_order_number(kind, sn, year)
