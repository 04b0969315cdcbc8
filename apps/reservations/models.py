"""
Reservations app models:
  - Reservation          : a vehicle rented by a client between two dates
  - ReservationStatusLog : audit trail of every status transition

Status is only ever changed through Reservation.transition_to() (or the
start / complete / cancel shortcuts), which enforces:

  CONFIRMED   → IN_PROGRESS | CANCELLED
  IN_PROGRESS → COMPLETED   | CANCELLED
  COMPLETED, CANCELLED are terminal.
"""
import secrets
import string
from urllib.parse import quote as urlquote

from django.core.validators import MinValueValidator
from django.db import models

from apps.core.models import UUIDModel, TimestampedModel
from apps.clients.models import Client
from apps.vehicles.models import Vehicle
from apps.reservations import pricing
from apps.reservations.exceptions import InvalidStatusTransitionError

REFERENCE_ALPHABET = string.ascii_uppercase + string.digits


def generate_reference() -> str:
    """'QR' followed by 9 random uppercase letters/digits, e.g. QR7K2M9XQ4A."""
    return 'QR' + ''.join(secrets.choice(REFERENCE_ALPHABET) for _ in range(9))


# ── Reservation State Machine ─────────────────────────────────────────────────

class ReservationStatus(models.TextChoices):
    CONFIRMED   = 'CONFIRMED',   'Confirmed'
    IN_PROGRESS = 'IN_PROGRESS', 'In progress'
    COMPLETED   = 'COMPLETED',   'Completed'
    CANCELLED   = 'CANCELLED',   'Cancelled'


ALLOWED_TRANSITIONS = {
    ReservationStatus.CONFIRMED: {ReservationStatus.IN_PROGRESS, ReservationStatus.CANCELLED},
    ReservationStatus.IN_PROGRESS: {ReservationStatus.COMPLETED, ReservationStatus.CANCELLED},
    ReservationStatus.COMPLETED: set(),
    ReservationStatus.CANCELLED: set(),
}

# Statuses that hold the vehicle for their date range
ACTIVE_STATUSES = (ReservationStatus.CONFIRMED, ReservationStatus.IN_PROGRESS)


def can_transition(from_status, to_status) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


class ReservationQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status__in=ACTIVE_STATUSES)

    def overlapping(self, start_date, end_date):
        """Reservations whose [start, end) range intersects the given one."""
        return self.filter(start_date__lt=end_date, end_date__gt=start_date)


class Reservation(UUIDModel, TimestampedModel):
    vehicle = models.ForeignKey(Vehicle, on_delete=models.PROTECT, related_name='reservations')
    client = models.ForeignKey(Client, on_delete=models.PROTECT, related_name='reservations')

    start_date = models.DateField(db_index=True)
    end_date = models.DateField()

    gps = models.BooleanField(default=False)
    full_insurance = models.BooleanField(default=False)
    child_seat = models.BooleanField(default=False)
    extra_driver = models.BooleanField(default=False)

    total_price = models.DecimalField(
        max_digits=10, decimal_places=2, default=0,
        validators=[MinValueValidator(0)],
        help_text='Price snapshot at booking time',
    )
    status = models.CharField(
        max_length=20, choices=ReservationStatus.choices,
        default=ReservationStatus.CONFIRMED, db_index=True,
    )
    reference = models.CharField(
        max_length=16, unique=True, default=generate_reference, editable=False,
        help_text='Code shown as a QR code at vehicle pick-up',
    )

    objects = ReservationQuerySet.as_manager()

    class Meta:
        verbose_name = 'Reservation'
        verbose_name_plural = 'Reservations'
        ordering = ['-created_at']

    def __str__(self):
        return (
            f"{self.reference} | {self.client.full_name} | "
            f"{self.vehicle.display_name} | {self.start_date} → {self.end_date}"
        )

    @property
    def options(self) -> dict:
        return {key: getattr(self, key) for key in pricing.OPTION_DAILY_PRICES}

    @property
    def days(self) -> int:
        return pricing.rental_days(self.start_date, self.end_date)

    def price_quote(self):
        """Itemised price at the vehicle's current daily rate."""
        return pricing.quote(self.vehicle.daily_rate, self.start_date, self.end_date, self.options)

    @property
    def is_active(self):
        return self.status in ACTIVE_STATUSES

    @property
    def is_reviewable(self):
        return self.status == ReservationStatus.COMPLETED

    @property
    def qr_payload(self):
        return f"RESERVATION:{self.id}:{self.reference}"

    @property
    def qr_image_url(self):
        return (
            'https://api.qrserver.com/v1/create-qr-code/?size=300x300&data='
            + urlquote(self.qr_payload, safe='')
        )

    @property
    def status_badge_class(self):
        """CSS class for status badge."""
        classes = {
            'CONFIRMED': 'badge-confirmed',
            'IN_PROGRESS': 'badge-progress',
            'COMPLETED': 'badge-completed',
            'CANCELLED': 'badge-cancelled',
        }
        return classes.get(self.status, 'badge-completed')

    @property
    def next_statuses(self):
        """[(value, label), ...] this reservation may move to, for the status select."""
        allowed = ALLOWED_TRANSITIONS.get(self.status, set())
        return [(value, label) for value, label in ReservationStatus.choices if value in allowed]

    # ── State transition helpers ──────────────────────────────────────────────

    def start(self, changed_by='system'):
        """Vehicle handed over to the client."""
        self.transition_to(ReservationStatus.IN_PROGRESS, changed_by)

    def complete(self, changed_by='system'):
        """Vehicle returned."""
        self.transition_to(ReservationStatus.COMPLETED, changed_by)

    def cancel(self, changed_by='admin', reason=''):
        self.transition_to(ReservationStatus.CANCELLED, changed_by, reason)

    def transition_to(self, new_status, changed_by, reason=''):
        old_status = self.status
        if not can_transition(old_status, new_status):
            raise InvalidStatusTransitionError(
                f"Reservation {self.reference} cannot go from "
                f"{ReservationStatus(old_status).label} to {ReservationStatus(new_status).label}."
            )
        self.status = new_status
        self.save(update_fields=['status', 'updated_at'])
        ReservationStatusLog.objects.create(
            reservation=self,
            from_status=old_status,
            to_status=new_status,
            changed_by=changed_by,
            reason=reason,
        )


# ── Reservation Audit Log ─────────────────────────────────────────────────────

class ReservationStatusLog(UUIDModel):
    """Immutable audit trail of every status transition on a reservation."""
    reservation = models.ForeignKey(
        Reservation, on_delete=models.CASCADE, related_name='status_logs',
    )
    from_status = models.CharField(max_length=20, choices=ReservationStatus.choices, blank=True)
    to_status = models.CharField(max_length=20, choices=ReservationStatus.choices)
    changed_by = models.CharField(max_length=80, help_text='system / client / staff username')
    reason = models.TextField(blank=True)
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Reservation Status Log'
        verbose_name_plural = 'Reservation Status Logs'
        ordering = ['changed_at']

    def __str__(self):
        return f"{self.reservation.reference}: {self.from_status or '∅'} → {self.to_status}"
