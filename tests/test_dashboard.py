from datetime import timedelta
from decimal import Decimal

import pytest
from django.contrib.auth.hashers import check_password
from django.core import mail
from django.urls import reverse
from django.utils import timezone

from apps.agencies.models import Agency
from apps.payments.models import Payment, PaymentMethod, PaymentStatus
from apps.reservations.models import ReservationStatus
from apps.staff.models import Employee, EmployeeRole
from apps.vehicles.models import Vehicle

pytestmark = pytest.mark.django_db


# ── Access control ────────────────────────────────────────────────────────────

@pytest.mark.parametrize('name', [
    'dashboard:overview', 'dashboard:reservation_list', 'dashboard:client_list',
    'dashboard:vehicle_list', 'dashboard:payment_list', 'dashboard:report',
])
def test_back_office_requires_staff(renter_http, name):
    response = renter_http.get(reverse(name))
    assert response.status_code == 302
    assert response.url.startswith(reverse('accounts:login'))


@pytest.mark.parametrize('name', [
    'dashboard:overview', 'dashboard:reservation_list', 'dashboard:client_list',
    'dashboard:vehicle_list', 'dashboard:agency_list', 'dashboard:payment_list', 'dashboard:report',
])
def test_staff_pages_render(staff_http, name):
    assert staff_http.get(reverse(name)).status_code == 200


@pytest.mark.parametrize('name', ['dashboard:employee_list', 'dashboard:employee_create', 'dashboard:agency_create'])
def test_admin_pages_refuse_plain_employees(staff_http, name):
    response = staff_http.get(reverse(name))
    assert response.status_code == 302
    assert response.url == reverse('dashboard:overview')


def test_admin_pages_open_to_administrators(admin_http):
    assert admin_http.get(reverse('dashboard:employee_list')).status_code == 200


def test_overview_kpis(staff_http, make_reservation, make_vehicle, today):
    make_vehicle(brand='Renault', model='Clio', is_available=False)
    make_reservation(start=today - timedelta(days=1), end=today + timedelta(days=2),
                     status=ReservationStatus.IN_PROGRESS)

    kpis = staff_http.get(reverse('dashboard:overview')).context['kpis']
    assert kpis['vehicles'] == 2
    assert kpis['vehicles_available'] == 1
    assert kpis['active_reservations'] == 1
    assert kpis['occupancy_rate'] == 50
    assert kpis['clients'] == 1


def test_revenue_data_json(staff_http, make_reservation):
    reservation = make_reservation()
    Payment.objects.create(
        reservation=reservation, amount=Decimal('125'), status=PaymentStatus.PAID,
        method=PaymentMethod.CARD, paid_on=timezone.now(),
    )
    months = staff_http.get(reverse('dashboard:revenue_data'), {'months': 3}).json()['months']
    assert len(months) == 3
    assert months[-1] == {'month': timezone.localdate().strftime('%Y-%m'), 'revenue': 125.0}


# ── Reservations ──────────────────────────────────────────────────────────────

def test_reservation_search(staff_http, make_reservation):
    wanted = make_reservation()
    make_reservation()
    response = staff_http.get(reverse('dashboard:reservation_list'), {'q': wanted.reference})
    assert list(response.context['reservations']) == [wanted]


def test_status_change_is_logged(staff_http, make_reservation):
    reservation = make_reservation()
    response = staff_http.post(
        reverse('dashboard:reservation_status', args=[reservation.pk]),
        {'status': ReservationStatus.IN_PROGRESS, 'reason': 'Keys handed over', 'next': 'list'},
    )
    assert response.url == reverse('dashboard:reservation_list')

    reservation.refresh_from_db()
    assert reservation.status == ReservationStatus.IN_PROGRESS
    log = reservation.status_logs.get(to_status=ReservationStatus.IN_PROGRESS)
    assert log.changed_by == 'employe@agence.com'
    assert log.reason == 'Keys handed over'


def test_cancellation_emails_client(staff_http, make_reservation, django_capture_on_commit_callbacks):
    reservation = make_reservation()
    with django_capture_on_commit_callbacks(execute=True):
        staff_http.post(
            reverse('dashboard:reservation_status', args=[reservation.pk]),
            {'status': ReservationStatus.CANCELLED, 'reason': 'Vehicle damaged'},
        )
    reservation.refresh_from_db()
    assert reservation.status == ReservationStatus.CANCELLED
    assert len(mail.outbox) == 1
    assert reservation.reference in mail.outbox[0].subject


def test_illegal_status_change_is_refused(staff_http, make_reservation):
    reservation = make_reservation(status=ReservationStatus.COMPLETED)
    response = staff_http.post(
        reverse('dashboard:reservation_status', args=[reservation.pk]),
        {'status': ReservationStatus.CONFIRMED},
    )
    assert response.url == reverse('dashboard:reservation_detail', args=[reservation.pk])
    reservation.refresh_from_db()
    assert reservation.status == ReservationStatus.COMPLETED


def test_status_change_requires_post(staff_http, make_reservation):
    reservation = make_reservation()
    assert staff_http.get(reverse('dashboard:reservation_status', args=[reservation.pk])).status_code == 405


# ── Clients ───────────────────────────────────────────────────────────────────

def test_client_list_tier_filter(staff_http, make_renter):
    make_renter(email='a@email.com', loyalty_points=650)
    gold = make_renter(email='b@email.com', loyalty_points=250)
    make_renter(email='c@email.com', loyalty_points=120)

    response = staff_http.get(reverse('dashboard:client_list'), {'tier': 'gold'})
    assert list(response.context['clients']) == [gold]
    assert response.context['stats']['vip'] == 1
    assert response.context['stats']['gold'] == 1


def test_client_detail(staff_http, renter, make_reservation):
    make_reservation()
    response = staff_http.get(reverse('dashboard:client_detail', args=[renter.pk]))
    assert response.status_code == 200
    assert response.context['reservations'].count() == 1


# ── Vehicles ──────────────────────────────────────────────────────────────────

def test_vehicle_wizard_creates_vehicle(staff_http, agency):
    url = reverse('dashboard:vehicle_create')
    staff_http.post(url, {
        'action': 'next', 'brand': 'Peugeot', 'model': '208',
        'category': 'compact', 'agency': str(agency.pk),
    })
    staff_http.post(url, {
        'action': 'next', 'fuel': 'petrol', 'transmission': 'manual',
        'seats': '5', 'daily_rate': '32.50',
    })
    staff_http.post(url, {
        'action': 'next', 'mileage': '12000', 'year': '2023', 'is_available': 'on',
    })
    staff_http.post(url, {'action': 'next', 'equipment': ['GPS', 'Bluetooth']})

    review = staff_http.get(url)
    assert review.context['wizard'].current_step.id == 'review'
    assert review.context['cleaned']['brand'] == 'Peugeot'

    response = staff_http.post(url, {'action': 'submit'})
    assert response.url == reverse('dashboard:vehicle_list')
    vehicle = Vehicle.objects.get(brand='Peugeot')
    assert vehicle.daily_rate == Decimal('32.50')
    assert vehicle.agency == agency
    assert vehicle.is_available
    assert vehicle.equipment == ['GPS', 'Bluetooth']


def test_vehicle_wizard_keeps_invalid_step(staff_http):
    url = reverse('dashboard:vehicle_create')
    staff_http.post(url, {'action': 'next', 'brand': 'Peugeot', 'model': '208', 'category': 'compact'})
    response = staff_http.post(url, {
        'action': 'next', 'fuel': 'petrol', 'transmission': 'manual', 'seats': '5', 'daily_rate': '0',
    })
    assert response.status_code == 200
    assert response.context['wizard'].current_step.id == 'specs'
    assert 'daily_rate' in response.context['form'].errors


def test_vehicle_wizard_cancel(staff_http):
    url = reverse('dashboard:vehicle_create')
    response = staff_http.post(url, {'action': 'cancel'})
    assert response.url == reverse('dashboard:vehicle_list')
    assert not Vehicle.objects.exists()


def test_vehicle_toggle(staff_http, vehicle):
    staff_http.post(reverse('dashboard:vehicle_toggle', args=[vehicle.pk]))
    vehicle.refresh_from_db()
    assert not vehicle.is_available


def test_vehicle_delete_archives(staff_http, vehicle, make_reservation):
    reservation = make_reservation()
    staff_http.post(reverse('dashboard:vehicle_delete', args=[vehicle.pk]))
    assert not Vehicle.objects.filter(pk=vehicle.pk).exists()
    assert Vehicle.all_objects.get(pk=vehicle.pk).is_archived
    reservation.refresh_from_db()
    assert reservation.vehicle_id == vehicle.pk


def test_vehicle_edit(staff_http, vehicle, agency):
    response = staff_http.post(reverse('dashboard:vehicle_edit', args=[vehicle.pk]), {
        'brand': 'Toyota', 'model': 'Yaris Hybrid', 'category': 'economy', 'agency': str(agency.pk),
        'fuel': 'hybrid', 'transmission': 'automatic', 'seats': '5', 'daily_rate': '29',
        'mileage': '46000', 'year': '2022', 'is_available': 'on',
    })
    assert response.url == reverse('dashboard:vehicle_list')
    vehicle.refresh_from_db()
    assert vehicle.model == 'Yaris Hybrid'
    assert vehicle.daily_rate == Decimal('29')


# ── Agencies ──────────────────────────────────────────────────────────────────

def test_agency_wizard_creates_agency(admin_http):
    url = reverse('dashboard:agency_create')
    admin_http.post(url, {'action': 'next', 'name': 'Agence Ouest', 'address': '1 quai de la Fosse, Nantes'})
    admin_http.post(url, {'action': 'next', 'phone': '0240000000', 'email': 'nantes@agence.com'})
    admin_http.post(url, {'action': 'next', 'opening_hours': '9h-18h'})
    response = admin_http.post(url, {'action': 'submit'})
    assert response.url == reverse('dashboard:agency_list')
    assert Agency.objects.get(name='Agence Ouest').city == 'Nantes'


def test_agency_with_employees_cannot_be_deleted(admin_http, agency):
    admin_http.post(reverse('dashboard:agency_delete', args=[agency.pk]))
    assert Agency.objects.filter(pk=agency.pk).exists()


def test_empty_agency_is_archived(admin_http):
    empty = Agency.objects.create(name='Agence Est', address='Strasbourg', phone='0388000000',
                                  email='est@agence.com')
    admin_http.post(reverse('dashboard:agency_delete', args=[empty.pk]))
    assert not Agency.objects.filter(pk=empty.pk).exists()
    assert Agency.all_objects.filter(pk=empty.pk).exists()


# ── Employees ─────────────────────────────────────────────────────────────────

def _employee_wizard_through_professional(http, agency):
    url = reverse('dashboard:employee_create')
    http.post(url, {'action': 'next', 'first_name': 'Luc', 'last_name': 'Bernard',
                    'email': 'Luc.Bernard@agence.com'})
    http.post(url, {'action': 'next', 'role': 'employee', 'agency': str(agency.pk),
                    'hired_on': '2024-03-01'})
    return url


def test_employee_wizard_creates_login(admin_http, agency):
    url = _employee_wizard_through_professional(admin_http, agency)
    admin_http.post(url, {'action': 'next', 'password1': 'bureau42', 'password2': 'bureau42'})

    review = admin_http.get(url)
    assert 'password1' not in review.context['summary']
    assert b'bureau42' not in review.content

    response = admin_http.post(url, {'action': 'submit'})
    assert response.url == reverse('dashboard:employee_list')
    employee = Employee.objects.get(email='luc.bernard@agence.com')
    assert employee.role == EmployeeRole.EMPLOYEE
    assert employee.user.is_staff
    assert employee.user.check_password('bureau42')


def test_employee_wizard_password_mismatch(admin_http, agency):
    url = _employee_wizard_through_professional(admin_http, agency)
    response = admin_http.post(url, {'action': 'next', 'password1': 'bureau42', 'password2': 'bureau43'})
    assert response.status_code == 200
    assert response.context['wizard'].current_step.id == 'security'
    assert 'password2' in response.context['form'].errors


def test_employee_wizard_keeps_only_password_hash_in_session(admin_http, agency):
    url = _employee_wizard_through_professional(admin_http, agency)
    admin_http.post(url, {'action': 'next', 'password1': 'bureau42', 'password2': 'bureau42'})

    session = admin_http.session
    stored = session['wizards']['employee_create']['data']['security']
    assert set(stored) == {'password_hash'}
    assert check_password('bureau42', stored['password_hash'][0])
    assert 'bureau42' not in str(dict(session))


def test_employee_wizard_mismatch_stores_nothing(admin_http, agency):
    url = _employee_wizard_through_professional(admin_http, agency)
    admin_http.post(url, {'action': 'next', 'password1': 'bureau42', 'password2': 'bureau43'})
    assert admin_http.session['wizards']['employee_create']['data']['security'] == {}


def test_employee_wizard_back_and_forth_keeps_password(admin_http, agency):
    url = _employee_wizard_through_professional(admin_http, agency)
    admin_http.post(url, {'action': 'next', 'password1': 'bureau42', 'password2': 'bureau42'})
    admin_http.post(url, {'action': 'previous'})
    # Password fields are never re-rendered, so they come back empty
    admin_http.post(url, {'action': 'next', 'password1': '', 'password2': ''})

    response = admin_http.post(url, {'action': 'submit'})
    assert response.url == reverse('dashboard:employee_list')
    employee = Employee.objects.get(email='luc.bernard@agence.com')
    assert employee.user.check_password('bureau42')


def test_employee_wizard_requires_password(admin_http, agency):
    url = _employee_wizard_through_professional(admin_http, agency)
    response = admin_http.post(url, {'action': 'next', 'password1': '', 'password2': ''})
    assert response.context['wizard'].current_step.id == 'security'
    assert 'password1' in response.context['form'].errors
    assert 'password2' in response.context['form'].errors


def test_employee_wizard_refuses_taken_email(admin_http, agency, employee):
    url = reverse('dashboard:employee_create')
    response = admin_http.post(url, {'action': 'next', 'first_name': 'Test', 'last_name': 'Bis',
                                     'email': 'employe@agence.com'})
    assert response.context['wizard'].current_step.id == 'personal'
    assert 'email' in response.context['form'].errors


def test_employee_delete_disables_login(admin_http, employee):
    admin_http.post(reverse('dashboard:employee_delete', args=[employee.pk]))
    employee.user.refresh_from_db()
    assert not employee.user.is_active
    assert not Employee.objects.filter(pk=employee.pk).exists()


def test_admin_cannot_delete_self(admin_http, admin_employee):
    admin_http.post(reverse('dashboard:employee_delete', args=[admin_employee.pk]))
    assert Employee.objects.filter(pk=admin_employee.pk).exists()


# ── Payments ──────────────────────────────────────────────────────────────────

def test_record_payment_defaults_to_reservation_total(staff_http, make_reservation):
    reservation = make_reservation(total=Decimal('150'))
    response = staff_http.post(reverse('dashboard:payment_create'), {
        'reservation': str(reservation.pk), 'method': 'CASH', 'status': 'PAID',
    })
    assert response.url == reverse('dashboard:payment_list')
    payment = Payment.objects.get()
    assert payment.amount == Decimal('150')
    assert payment.paid_on is not None
    assert payment.recorded_by == 'employe@agence.com'


def test_cancelled_reservation_cannot_take_payment(staff_http, make_reservation):
    reservation = make_reservation(status=ReservationStatus.CANCELLED)
    response = staff_http.post(reverse('dashboard:payment_create'), {
        'reservation': str(reservation.pk), 'method': 'CARD', 'status': 'PAID',
    })
    assert response.status_code == 200
    assert 'reservation' in response.context['form'].errors


def test_payment_lifecycle(staff_http, make_reservation):
    payment = Payment.objects.create(
        reservation=make_reservation(), amount=Decimal('125'), method=PaymentMethod.CARD,
    )
    refund_url = reverse('dashboard:payment_refund', args=[payment.pk])

    # A pending payment cannot be refunded
    staff_http.post(refund_url)
    payment.refresh_from_db()
    assert payment.status == PaymentStatus.PENDING

    staff_http.post(reverse('dashboard:payment_mark_paid', args=[payment.pk]))
    payment.refresh_from_db()
    assert payment.status == PaymentStatus.PAID
    assert payment.paid_on is not None

    staff_http.post(refund_url)
    payment.refresh_from_db()
    assert payment.status == PaymentStatus.REFUNDED


def test_payment_list_totals(staff_http, make_reservation):
    reservation = make_reservation()
    Payment.objects.create(reservation=reservation, amount=Decimal('100'), method=PaymentMethod.CARD,
                           status=PaymentStatus.PAID, paid_on=timezone.now())
    Payment.objects.create(reservation=reservation, amount=Decimal('25'), method=PaymentMethod.CASH)
    totals = staff_http.get(reverse('dashboard:payment_list')).context['totals']
    assert totals == {'paid': Decimal('100'), 'pending': Decimal('25'), 'refunded': Decimal('0')}
