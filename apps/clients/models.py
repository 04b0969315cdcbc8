"""
Client model: a renter with a login account.

Phone numbers are normalised to the 10-digit French national format so the
back-office search finds a client however the number was typed:
  +33 1 23 45 67 89  →  0123456789
  0033123456789      →  0123456789
  01.23.45.67.89     →  0123456789
"""
import re
from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.core.models import UUIDModel, TimestampedModel


def normalize_phone(raw: str) -> str:
    """
    Normalise a French phone number to exactly 10 digits starting with 0.

    Raises ValueError if the number cannot be normalised.
    """
    digits = re.sub(r'\D', '', raw or '')

    if digits.startswith('0033'):
        digits = '0' + digits[4:]
    elif len(digits) == 11 and digits.startswith('33'):
        digits = '0' + digits[2:]

    if len(digits) != 10 or not digits.startswith('0'):
        raise ValueError(
            f"Cannot normalise phone number '{raw}': "
            f"expected 10 digits starting with 0, got '{digits}'."
        )
    return digits


class LoyaltyTier(models.TextChoices):
    VIP      = 'vip',      'VIP'
    GOLD     = 'gold',     'Gold'
    SILVER   = 'silver',   'Silver'
    STANDARD = 'standard', 'Standard'


# (tier, minimum points), highest first
LOYALTY_THRESHOLDS = [
    (LoyaltyTier.VIP, 500),
    (LoyaltyTier.GOLD, 200),
    (LoyaltyTier.SILVER, 100),
    (LoyaltyTier.STANDARD, 0),
]


def loyalty_tier_for(points: int) -> str:
    for tier, minimum in LOYALTY_THRESHOLDS:
        if points >= minimum:
            return tier
    return LoyaltyTier.STANDARD


def loyalty_points_range(tier: str):
    """(min, max_exclusive_or_None) points for a tier, used by list filters."""
    bounds = dict(LOYALTY_THRESHOLDS)
    ordered = [t for t, _ in LOYALTY_THRESHOLDS]
    index = ordered.index(tier)
    upper = bounds[ordered[index - 1]] if index > 0 else None
    return bounds[tier], upper


class Client(UUIDModel, TimestampedModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='client',
    )
    first_name = models.CharField(max_length=80)
    last_name = models.CharField(max_length=80)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=20, db_index=True)
    birth_date = models.DateField(null=True, blank=True)
    licence_number = models.CharField(max_length=40)
    address = models.CharField(max_length=255, blank=True)
    loyalty_points = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = 'Client'
        verbose_name_plural = 'Clients'
        ordering = ['last_name', 'first_name']

    def __str__(self):
        return f"{self.full_name} ({self.email})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def loyalty_tier(self):
        return loyalty_tier_for(self.loyalty_points)

    @property
    def loyalty_tier_label(self):
        return LoyaltyTier(self.loyalty_tier).label

    @property
    def loyalty_value(self):
        """Currency value of the accumulated points (100 points = 10 EUR)."""
        rule = settings.LOYALTY_POINT_VALUE
        return (self.loyalty_points // rule['points']) * rule['amount']

    @property
    def registered_on(self):
        return timezone.localtime(self.created_at).date()
