"""
Payment model: money received (or refunded) against a reservation.
Payments are recorded by staff at the counter; there is no online gateway.

Lifecycle: PENDING → PAID → REFUNDED. Transitions go through mark_paid() /
refund() rather than direct field writes.
"""
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from apps.core.models import UUIDModel, TimestampedModel
from apps.reservations.models import Reservation


class PaymentStatus(models.TextChoices):
    PENDING  = 'PENDING',  'Pending'
    PAID     = 'PAID',     'Paid'
    REFUNDED = 'REFUNDED', 'Refunded'


class PaymentMethod(models.TextChoices):
    CARD     = 'CARD',     'Card'
    CASH     = 'CASH',     'Cash'
    TRANSFER = 'TRANSFER', 'Bank transfer'


class PaymentTransitionError(Exception):
    """Raised by mark_paid() / refund() when the payment is in the wrong status."""
    pass


class Payment(UUIDModel, TimestampedModel):
    reservation = models.ForeignKey(
        Reservation, on_delete=models.PROTECT, related_name='payments',
    )
    amount = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)],
    )
    status = models.CharField(
        max_length=10, choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING, db_index=True,
    )
    method = models.CharField(max_length=10, choices=PaymentMethod.choices)
    paid_on = models.DateTimeField(null=True, blank=True)
    recorded_by = models.CharField(max_length=80, blank=True)

    class Meta:
        verbose_name = 'Payment'
        verbose_name_plural = 'Payments'
        ordering = ['-created_at']

    def __str__(self):
        return f"Payment {self.id_short} [{self.status}] — {self.amount} € ({self.reservation.reference})"

    @property
    def status_badge_class(self):
        classes = {
            'PAID': 'badge-confirmed',
            'PENDING': 'badge-pending',
            'REFUNDED': 'badge-cancelled',
        }
        return classes.get(self.status, 'badge-pending')

    def mark_paid(self, when=None):
        if self.status != PaymentStatus.PENDING:
            raise PaymentTransitionError(f"Only a pending payment can be marked paid (is {self.status}).")
        self.status = PaymentStatus.PAID
        self.paid_on = when or timezone.now()
        self.save(update_fields=['status', 'paid_on', 'updated_at'])

    def refund(self):
        if self.status != PaymentStatus.PAID:
            raise PaymentTransitionError(f"Only a paid payment can be refunded (is {self.status}).")
        self.status = PaymentStatus.REFUNDED
        self.save(update_fields=['status', 'updated_at'])
