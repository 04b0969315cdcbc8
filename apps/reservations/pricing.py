"""
Rental price calculation. Pure functions, no database access.

  total = days × daily_rate + Σ days × surcharge(option)   for enabled options

`days` is the ceiling of (end − start) in calendar days. A range whose end
is not after its start prices at 0; `quote()` flags such a range with
`is_valid_range=False` so callers can tell it apart from a free rental.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal

# Per-day surcharge of each optional add-on, in RENTAL_CURRENCY
OPTION_DAILY_PRICES = {
    'gps': Decimal('5'),
    'full_insurance': Decimal('15'),
    'child_seat': Decimal('8'),
    'extra_driver': Decimal('10'),
}

OPTION_LABELS = {
    'gps': 'GPS',
    'full_insurance': 'Full insurance',
    'child_seat': 'Child seat',
    'extra_driver': 'Additional driver',
}

CENTS = Decimal('0.01')
ONE_DAY = timedelta(days=1)


def rental_days(start, end) -> int:
    """Billable days between two dates (or datetimes), rounded up."""
    if isinstance(start, datetime) != isinstance(end, datetime):
        # Mixed date/datetime: compare calendar dates
        start = start.date() if isinstance(start, datetime) else start
        end = end.date() if isinstance(end, datetime) else end
    return math.ceil((end - start) / ONE_DAY)


def _enabled(options) -> list:
    """Option keys switched on, in OPTION_DAILY_PRICES order. Unknown keys are ignored."""
    options = options or {}
    return [key for key in OPTION_DAILY_PRICES if options.get(key)]


def calculate_total(daily_rate, start, end, options=None) -> Decimal:
    days = rental_days(start, end)
    if days <= 0:
        return Decimal('0')
    rate = Decimal(daily_rate)
    total = days * rate
    for key in _enabled(options):
        total += days * OPTION_DAILY_PRICES[key]
    return total


@dataclass(frozen=True)
class OptionLine:
    key: str
    label: str
    daily_price: Decimal
    amount: Decimal


@dataclass(frozen=True)
class PriceQuote:
    days: int
    daily_rate: Decimal
    base: Decimal
    lines: list = field(default_factory=list)
    total: Decimal = Decimal('0')
    is_valid_range: bool = True

    @property
    def options_total(self) -> Decimal:
        return sum((line.amount for line in self.lines), Decimal('0'))

    def as_dict(self) -> dict:
        """JSON-friendly form, amounts as 2-decimal strings."""
        return {
            'days': self.days,
            'daily_rate': str(Decimal(self.daily_rate).quantize(CENTS)),
            'base': str(self.base.quantize(CENTS)),
            'options': [
                {
                    'key': line.key,
                    'label': line.label,
                    'daily_price': str(line.daily_price.quantize(CENTS)),
                    'amount': str(line.amount.quantize(CENTS)),
                }
                for line in self.lines
            ],
            'total': str(self.total.quantize(CENTS)),
            'is_valid_range': self.is_valid_range,
        }


def quote(daily_rate, start, end, options=None) -> PriceQuote:
    """Itemised price for a rental; `total` always equals calculate_total()."""
    rate = Decimal(daily_rate)
    days = rental_days(start, end)
    if days <= 0:
        return PriceQuote(
            days=max(days, 0), daily_rate=rate, base=Decimal('0'),
            lines=[], total=Decimal('0'), is_valid_range=False,
        )
    lines = [
        OptionLine(
            key=key,
            label=OPTION_LABELS[key],
            daily_price=OPTION_DAILY_PRICES[key],
            amount=days * OPTION_DAILY_PRICES[key],
        )
        for key in _enabled(options)
    ]
    base = days * rate
    return PriceQuote(
        days=days,
        daily_rate=rate,
        base=base,
        lines=lines,
        total=calculate_total(rate, start, end, options),
        is_valid_range=True,
    )
