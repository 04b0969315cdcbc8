"""
Reservation engine: pure business logic, no HTTP/request awareness.

Public API:
  validate_dates(start_date, end_date, today=None)
  is_vehicle_free(vehicle, start_date, end_date, exclude=None)
  create_reservation(vehicle, client, start_date, end_date, options, changed_by='client')
  change_status(reservation, new_status, changed_by, reason='')
  sync_statuses(today=None)
"""
import logging
from datetime import date as date_type

from django.db import transaction
from django.utils import timezone

from apps.vehicles.models import Vehicle
from apps.reservations import pricing
from apps.reservations.models import (
    Reservation, ReservationStatus, ReservationStatusLog,
)
from apps.reservations.exceptions import (
    InvalidDateRangeError,
    PastStartDateError,
    VehicleUnavailableError,
    ReservationConflictError,
)
from apps.notifications import emails

logger = logging.getLogger(__name__)


# ── Validation ────────────────────────────────────────────────────────────────

def validate_dates(start_date: date_type, end_date: date_type, today: date_type = None) -> None:
    """
    Raises:
      PastStartDateError      pick-up date before today
      InvalidDateRangeError   return date not strictly after pick-up date
    """
    today = today or timezone.localdate()
    if start_date < today:
        raise PastStartDateError("The pick-up date cannot be in the past.")
    if end_date <= start_date:
        raise InvalidDateRangeError("The return date must be after the pick-up date.")


def is_vehicle_free(vehicle: Vehicle, start_date: date_type, end_date: date_type,
                    exclude=None) -> bool:
    """True if no CONFIRMED / IN_PROGRESS reservation of the vehicle overlaps the range."""
    qs = Reservation.objects.active().overlapping(start_date, end_date).filter(vehicle=vehicle)
    if exclude is not None:
        qs = qs.exclude(pk=exclude.pk)
    return not qs.exists()


# ── Core: Reservation Creation ────────────────────────────────────────────────

@transaction.atomic
def _create(vehicle: Vehicle, client, start_date, end_date, options: dict,
            changed_by: str) -> Reservation:
    # Lock the vehicle row so two concurrent bookings of the same car serialise here
    locked = (
        Vehicle.all_objects
        .select_for_update()
        .filter(pk=vehicle.pk)
        .first()
    )
    if locked is None or locked.is_archived or not locked.is_available:
        raise VehicleUnavailableError("This vehicle is not available for rental.")

    if not is_vehicle_free(locked, start_date, end_date):
        raise ReservationConflictError(
            "This vehicle is already reserved for part of the selected dates. "
            "Please choose other dates or another vehicle."
        )

    total = pricing.calculate_total(locked.daily_rate, start_date, end_date, options)
    reservation = Reservation.objects.create(
        vehicle=locked,
        client=client,
        start_date=start_date,
        end_date=end_date,
        total_price=total.quantize(pricing.CENTS),
        status=ReservationStatus.CONFIRMED,
        **{key: bool((options or {}).get(key)) for key in pricing.OPTION_DAILY_PRICES},
    )
    ReservationStatusLog.objects.create(
        reservation=reservation,
        from_status='',
        to_status=ReservationStatus.CONFIRMED,
        changed_by=changed_by,
        reason='Reservation created',
    )
    return reservation


def create_reservation(vehicle: Vehicle, client, start_date: date_type, end_date: date_type,
                       options: dict = None, changed_by: str = 'client',
                       today: date_type = None) -> Reservation:
    """
    Create a CONFIRMED reservation and email the client.
    The total is computed here from the vehicle's current daily rate.

    Raises PastStartDateError, InvalidDateRangeError, VehicleUnavailableError,
    ReservationConflictError.
    """
    validate_dates(start_date, end_date, today=today)
    reservation = _create(vehicle, client, start_date, end_date, options or {}, changed_by)
    logger.info(
        'Reservation %s created: %s for %s, %s → %s, total %s',
        reservation.reference, vehicle.display_name, client.email,
        start_date, end_date, reservation.total_price,
    )
    emails.send_reservation_confirmed(reservation)
    return reservation


# ── Core: Status Changes ──────────────────────────────────────────────────────

@transaction.atomic
def change_status(reservation: Reservation, new_status: str, changed_by: str,
                  reason: str = '') -> Reservation:
    """
    Move a reservation through the state machine.
    Raises InvalidStatusTransitionError for an illegal transition.
    """
    old_status = reservation.status
    reservation.transition_to(new_status, changed_by, reason)
    logger.info(
        'Reservation %s: %s → %s by %s',
        reservation.reference, old_status, new_status, changed_by,
    )
    if new_status == ReservationStatus.CANCELLED:
        transaction.on_commit(lambda: emails.send_reservation_cancelled(reservation, reason))
    return reservation


def sync_statuses(today: date_type = None) -> dict:
    """
    Calendar-driven transitions, run daily by the sync_reservation_statuses command:
      CONFIRMED   → IN_PROGRESS  once the pick-up date is reached
      IN_PROGRESS → COMPLETED    once the return date has passed
    Returns {'started': n, 'completed': n}.
    """
    today = today or timezone.localdate()
    started = completed = 0

    for reservation in Reservation.objects.filter(
        status=ReservationStatus.CONFIRMED, start_date__lte=today,
    ).select_related('vehicle'):
        change_status(reservation, ReservationStatus.IN_PROGRESS, 'system', 'Pick-up date reached')
        started += 1

    # Reservations started above with an already-past return date complete in the same run
    for reservation in Reservation.objects.filter(
        status=ReservationStatus.IN_PROGRESS, end_date__lt=today,
    ).select_related('vehicle'):
        change_status(reservation, ReservationStatus.COMPLETED, 'system', 'Return date passed')
        completed += 1

    return {'started': started, 'completed': completed}
