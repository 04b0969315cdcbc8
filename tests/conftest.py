"""
Shared fixtures.

`renter` is a Client profile (the name `client` belongs to pytest-django's
test client). The *_http fixtures are test clients already logged in.
"""
from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.agencies.models import Agency
from apps.clients.models import Client
from apps.reservations.models import Reservation, ReservationStatus
from apps.staff.models import Employee, EmployeeRole
from apps.vehicles.models import FuelType, Transmission, Vehicle, VehicleCategory

User = get_user_model()


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def agency(db):
    return Agency.objects.create(
        name='Agence Centrale',
        address='100 Boulevard Principal, Paris',
        phone='0145678901',
        email='contact@agence.com',
    )


@pytest.fixture
def make_vehicle(agency):
    def _make(**overrides):
        data = {
            'brand': 'Toyota', 'model': 'Yaris', 'agency': agency,
            'category': VehicleCategory.ECONOMY, 'daily_rate': Decimal('25'),
            'fuel': FuelType.PETROL, 'transmission': Transmission.MANUAL,
            'seats': 5, 'mileage': 45000, 'year': 2022,
        }
        data.update(overrides)
        return Vehicle.objects.create(**data)
    return _make


@pytest.fixture
def vehicle(make_vehicle):
    return make_vehicle()


@pytest.fixture
def make_renter(db):
    def _make(email='jean.dupont@email.com', first_name='Jean', last_name='Dupont', **overrides):
        user = User.objects.create_user(
            username=email, email=email, password='client123',
            first_name=first_name, last_name=last_name,
        )
        data = {
            'user': user, 'first_name': first_name, 'last_name': last_name, 'email': email,
            'phone': '0123456789', 'licence_number': '123456789',
        }
        data.update(overrides)
        return Client.objects.create(**data)
    return _make


@pytest.fixture
def renter(make_renter):
    return make_renter()


@pytest.fixture
def make_employee(agency):
    def _make(email='employe@agence.com', role=EmployeeRole.EMPLOYEE):
        user = User.objects.create_user(
            username=email, email=email, password='staff123', is_staff=True,
        )
        return Employee.objects.create(
            user=user, agency=agency, first_name='Test', last_name='Employe',
            email=email, role=role,
        )
    return _make


@pytest.fixture
def employee(make_employee):
    return make_employee()


@pytest.fixture
def admin_employee(make_employee):
    return make_employee(email='admin@agence.com', role=EmployeeRole.ADMIN)


@pytest.fixture
def make_reservation(vehicle, renter, today):
    """Insert a reservation directly, bypassing the engine's date checks."""
    def _make(start=None, end=None, status=ReservationStatus.CONFIRMED, total=Decimal('125'), **overrides):
        start = start or today + timedelta(days=2)
        end = end or start + timedelta(days=5)
        data = {
            'vehicle': vehicle, 'client': renter, 'start_date': start, 'end_date': end,
            'total_price': total, 'status': status,
        }
        data.update(overrides)
        return Reservation.objects.create(**data)
    return _make


@pytest.fixture
def renter_http(client, renter):
    client.force_login(renter.user)
    return client


@pytest.fixture
def staff_http(client, employee):
    client.force_login(employee.user)
    return client


@pytest.fixture
def admin_http(client, admin_employee):
    client.force_login(admin_employee.user)
    return client


@pytest.fixture
def fixed_dates():
    return date(2024, 1, 20), date(2024, 1, 25)
