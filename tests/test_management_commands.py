from datetime import timedelta
from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import CommandError, call_command

from apps.agencies.models import Agency
from apps.clients.models import Client
from apps.payments.models import Payment
from apps.reservations.models import Reservation, ReservationStatus
from apps.reviews.models import Review
from apps.staff.models import Employee, EmployeeRole
from apps.vehicles.models import Vehicle

pytestmark = pytest.mark.django_db


def _run(*args, **kwargs):
    out = StringIO()
    call_command(*args, stdout=out, **kwargs)
    return out.getvalue()


def test_seed_data_populates_demo_records():
    _run('seed_data')

    assert Agency.objects.count() == 3
    assert Vehicle.objects.count() == 4
    assert Vehicle.objects.filter(is_available=False).get().brand == 'BMW'
    assert Client.objects.count() == 2
    assert Employee.objects.get(email='admin@agence.com').role == EmployeeRole.ADMIN
    assert Reservation.objects.count() == 4
    assert Payment.objects.count() == 4
    assert Review.objects.count() == 2

    jean = Client.objects.get(email='jean.dupont@email.com')
    assert jean.user.check_password('client123')
    assert jean.loyalty_tier == 'silver'

    completed = Reservation.objects.filter(status=ReservationStatus.COMPLETED)
    assert completed.count() == 2
    assert all(r.status_logs.count() == 2 for r in completed)


def test_seed_data_prices_match_pricing_rules():
    _run('seed_data')
    # Yaris at 25/day for 5 days with GPS
    yaris_rental = Reservation.objects.get(vehicle__model='Yaris')
    assert str(yaris_rental.total_price) == '150.00'


def test_seed_data_is_idempotent():
    _run('seed_data')
    _run('seed_data')
    assert Agency.objects.count() == 3
    assert Reservation.objects.count() == 4
    assert get_user_model().objects.filter(username='employe@agence.com').count() == 1


def test_seed_data_flush_recreates(renter):
    _run('seed_data')
    output = _run('seed_data', '--flush')
    assert 'Flushing existing data' in output
    assert not Client.objects.filter(pk=renter.pk).exists()
    assert Client.objects.filter(email=renter.email).exists()
    assert Agency.all_objects.count() == 3
    assert Reservation.objects.count() == 4


def test_sync_command_reports_counts(make_reservation, today):
    make_reservation(start=today, end=today + timedelta(days=3))
    make_reservation(start=today - timedelta(days=5), end=today - timedelta(days=1),
                     status=ReservationStatus.IN_PROGRESS)

    output = _run('sync_reservation_statuses')
    assert 'started 1, completed 1 reservations' in output


def test_sync_command_accepts_date(make_reservation, today):
    reservation = make_reservation(start=today + timedelta(days=2), end=today + timedelta(days=4))
    output = _run('sync_reservation_statuses', '--date', (today + timedelta(days=5)).isoformat())
    reservation.refresh_from_db()
    assert reservation.status == ReservationStatus.COMPLETED
    assert 'started 1, completed 1' in output


def test_sync_command_rejects_bad_date():
    with pytest.raises(CommandError):
        call_command('sync_reservation_statuses', '--date', 'not-a-date', stdout=StringIO())
