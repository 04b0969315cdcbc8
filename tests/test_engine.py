from datetime import timedelta
from decimal import Decimal

import pytest
from django.core import mail

from apps.reservations import engine
from apps.reservations.exceptions import (
    InvalidDateRangeError,
    InvalidStatusTransitionError,
    PastStartDateError,
    ReservationConflictError,
    VehicleUnavailableError,
)
from apps.reservations.models import Reservation, ReservationStatus

pytestmark = pytest.mark.django_db


def book(vehicle, renter, start, days=5, **options):
    return engine.create_reservation(vehicle, renter, start, start + timedelta(days=days), options)


# ── Creation ──────────────────────────────────────────────────────────────────

def test_create_reservation_prices_and_confirms(vehicle, renter, today):
    reservation = book(vehicle, renter, today + timedelta(days=3), gps=True)

    assert reservation.status == ReservationStatus.CONFIRMED
    assert reservation.total_price == Decimal('150.00')
    assert reservation.gps is True and reservation.child_seat is False
    assert reservation.reference.startswith('QR') and len(reservation.reference) == 11


def test_create_reservation_logs_initial_status(vehicle, renter, today):
    reservation = book(vehicle, renter, today + timedelta(days=1))
    log = reservation.status_logs.get()
    assert log.from_status == ''
    assert log.to_status == ReservationStatus.CONFIRMED


def test_create_reservation_sends_confirmation_email(vehicle, renter, today):
    reservation = book(vehicle, renter, today + timedelta(days=1))
    assert len(mail.outbox) == 1
    assert mail.outbox[0].to == [renter.email]
    assert reservation.reference in mail.outbox[0].body


def test_start_today_is_allowed(vehicle, renter, today):
    assert book(vehicle, renter, today).start_date == today


def test_past_start_date_is_refused(vehicle, renter, today):
    with pytest.raises(PastStartDateError):
        book(vehicle, renter, today - timedelta(days=1))
    assert not Reservation.objects.exists()


@pytest.mark.parametrize('days', [0, -2])
def test_end_not_after_start_is_refused(vehicle, renter, today, days):
    with pytest.raises(InvalidDateRangeError):
        book(vehicle, renter, today + timedelta(days=3), days=days)


def test_unavailable_vehicle_is_refused(make_vehicle, renter, today):
    vehicle = make_vehicle(is_available=False)
    with pytest.raises(VehicleUnavailableError):
        book(vehicle, renter, today + timedelta(days=1))


def test_archived_vehicle_is_refused(vehicle, renter, today):
    vehicle.delete()
    with pytest.raises(VehicleUnavailableError):
        book(vehicle, renter, today + timedelta(days=1))


def test_overlapping_reservation_is_refused(vehicle, renter, make_renter, today):
    start = today + timedelta(days=5)
    book(vehicle, renter, start, days=5)
    other = make_renter(email='marie.martin@email.com', first_name='Marie', last_name='Martin')

    with pytest.raises(ReservationConflictError):
        book(vehicle, other, start + timedelta(days=4), days=3)


def test_back_to_back_reservations_are_allowed(vehicle, renter, today):
    start = today + timedelta(days=5)
    book(vehicle, renter, start, days=5)
    second = book(vehicle, renter, start + timedelta(days=5), days=2)
    assert second.pk


def test_cancelled_reservation_frees_the_dates(vehicle, renter, today):
    start = today + timedelta(days=5)
    first = book(vehicle, renter, start)
    engine.change_status(first, ReservationStatus.CANCELLED, 'admin')
    assert book(vehicle, renter, start).status == ReservationStatus.CONFIRMED


def test_is_vehicle_free_can_exclude_a_reservation(vehicle, make_reservation, today):
    reservation = make_reservation(start=today + timedelta(days=2), end=today + timedelta(days=6))
    assert not engine.is_vehicle_free(vehicle, reservation.start_date, reservation.end_date)
    assert engine.is_vehicle_free(vehicle, reservation.start_date, reservation.end_date, exclude=reservation)


# ── Status machine ────────────────────────────────────────────────────────────

def test_full_lifecycle_is_logged(make_reservation):
    reservation = make_reservation()
    engine.change_status(reservation, ReservationStatus.IN_PROGRESS, 'staff@agence.com')
    engine.change_status(reservation, ReservationStatus.COMPLETED, 'staff@agence.com')

    reservation.refresh_from_db()
    assert reservation.status == ReservationStatus.COMPLETED
    transitions = [(log.from_status, log.to_status) for log in reservation.status_logs.all()]
    assert transitions == [
        (ReservationStatus.CONFIRMED, ReservationStatus.IN_PROGRESS),
        (ReservationStatus.IN_PROGRESS, ReservationStatus.COMPLETED),
    ]


@pytest.mark.parametrize('start_status,target', [
    (ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED),
    (ReservationStatus.COMPLETED, ReservationStatus.CANCELLED),
    (ReservationStatus.CANCELLED, ReservationStatus.CONFIRMED),
    (ReservationStatus.IN_PROGRESS, ReservationStatus.CONFIRMED),
])
def test_illegal_transitions_are_refused(make_reservation, start_status, target):
    reservation = make_reservation(status=start_status)
    with pytest.raises(InvalidStatusTransitionError):
        engine.change_status(reservation, target, 'admin')
    reservation.refresh_from_db()
    assert reservation.status == start_status
    assert not reservation.status_logs.exists()


def test_cancel_emails_the_client_after_commit(make_reservation, django_capture_on_commit_callbacks):
    reservation = make_reservation()
    with django_capture_on_commit_callbacks(execute=True):
        engine.change_status(reservation, ReservationStatus.CANCELLED, 'admin', reason='Vehicle damaged')

    assert len(mail.outbox) == 1
    assert 'Vehicle damaged' in mail.outbox[0].body
    assert reservation.status_logs.get().reason == 'Vehicle damaged'


# ── Calendar sync ─────────────────────────────────────────────────────────────

def test_sync_statuses_starts_and_completes(make_reservation, today):
    due = make_reservation(start=today, end=today + timedelta(days=3))
    future = make_reservation(start=today + timedelta(days=10), end=today + timedelta(days=12))
    returned = make_reservation(
        start=today - timedelta(days=6), end=today - timedelta(days=1),
        status=ReservationStatus.IN_PROGRESS,
    )

    result = engine.sync_statuses(today)

    assert result == {'started': 1, 'completed': 1}
    for obj in (due, future, returned):
        obj.refresh_from_db()
    assert due.status == ReservationStatus.IN_PROGRESS
    assert future.status == ReservationStatus.CONFIRMED
    assert returned.status == ReservationStatus.COMPLETED


def test_sync_statuses_takes_an_overdue_booking_all_the_way(make_reservation, today):
    stale = make_reservation(start=today - timedelta(days=5), end=today - timedelta(days=2))
    assert engine.sync_statuses(today) == {'started': 1, 'completed': 1}
    stale.refresh_from_db()
    assert stale.status == ReservationStatus.COMPLETED
    assert stale.status_logs.count() == 2
