from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from dateutil.relativedelta import relativedelta

MONTHLY_EARNING_RATE = Decimal("0.005")


def calculate_maturity(purchase_date: date, lock_in_months: int) -> date:
    return purchase_date + relativedelta(months=lock_in_months or 0)


def calculate_monthly_earning(amount_invested: Decimal) -> Decimal:
    return (Decimal(amount_invested) * MONTHLY_EARNING_RATE).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )


def days_held(purchase_date: date, today: date | None = None) -> int:
    return ((today or date.today()) - purchase_date).days
