"""USD to NPR remittance arithmetic - conversion, provider fees, delivery estimates"""

import math
from datetime import datetime, timedelta
from typing import Dict
from homefin.domain.models import RemittanceQuote
from homefin.utils.date_utils import round_currency

TRANSFER_METHODS = ("western-union", "moneygram", "bank-transfer", "crypto", "other")

# (upper bound exclusive, fee) tiers; the last tier applies to anything larger
TIERED_FEES: Dict[str, list[tuple[float, float]]] = {
    "western-union": [(100, 5.0), (500, 10.0), (math.inf, 15.0)],
    "moneygram": [(100, 4.5), (500, 9.5), (math.inf, 14.0)],
}
FLAT_FEES: Dict[str, float] = {"bank-transfer": 25.0}
PERCENTAGE_FEES: Dict[str, float] = {"crypto": 0.01}

DELIVERY_DAYS: Dict[str, float] = {
    "western-union": 1,
    "moneygram": 1,
    "bank-transfer": 3,
    "crypto": 0.5,
    "other": 2,
}
DEFAULT_DELIVERY_DAYS = 2


def convert_usd_to_npr(usd_amount: float, rate: float) -> float:
    return round_currency(usd_amount * rate)


def convert_npr_to_usd(npr_amount: float, rate: float) -> float:
    return round_currency(npr_amount / rate)


def get_transfer_fee(method: str, amount: float) -> float:
    """Provider fee in USD; unknown methods are free"""
    if method in TIERED_FEES:
        for upper_bound, fee in TIERED_FEES[method]:
            if amount < upper_bound:
                return fee
    if method in FLAT_FEES:
        return FLAT_FEES[method]
    if method in PERCENTAGE_FEES:
        return amount * PERCENTAGE_FEES[method]
    return 0.0


def get_expected_delivery_date(method: str, now: datetime | None = None) -> datetime:
    """Now plus the provider's delivery time, same-day options rounded up to a whole day"""
    if now is None:
        now = datetime.now()
    days = DELIVERY_DAYS.get(method, DEFAULT_DELIVERY_DAYS)
    return now + timedelta(days=math.ceil(days))


def format_currency(amount: float, currency: str) -> str:
    """
    Format for display.

    USD uses western grouping ($1,234.56); NPR uses South Asian lakh/crore
    grouping (₨1,23,456.78).
    """
    sign = "-" if amount < 0 else ""
    whole, cents = f"{abs(amount):.2f}".split(".")

    if currency == "USD":
        return f"{sign}${int(whole):,}.{cents}"
    if currency == "NPR":
        return f"{sign}₨{_group_south_asian(whole)}.{cents}"
    raise ValueError(f"Unsupported currency: {currency}")


def _group_south_asian(digits: str) -> str:
    # Last three digits, then groups of two
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def build_remittance_quote(amount: float, method: str, rate: float, now: datetime | None = None) -> RemittanceQuote:
    """
    Price a transfer of `amount` USD. `rate` should be the sell rate, the one
    applied when sending money to Nepal.
    """
    fee = round_currency(get_transfer_fee(method, amount))
    return RemittanceQuote(
        amount=amount,
        exchange_rate=rate,
        local_amount=convert_usd_to_npr(amount, rate),
        transfer_method=method,
        transfer_fee=fee,
        total_cost=round_currency(amount + fee),
        expected_delivery=get_expected_delivery_date(method, now),
    )
