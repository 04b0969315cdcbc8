from datetime import timedelta
from decimal import Decimal

import pytest
from django.core import mail
from django.urls import reverse

from apps.reservations.models import Reservation, ReservationStatus

pytestmark = pytest.mark.django_db


def book_url(vehicle):
    return reverse('reservations:book', args=[vehicle.pk])


def dates_payload(today, start_in=3, days=5):
    start = today + timedelta(days=start_in)
    return {
        'action': 'next',
        'start_date': start.isoformat(),
        'end_date': (start + timedelta(days=days)).isoformat(),
    }


def test_booking_wizard_creates_reservation(renter_http, vehicle, renter, today):
    url = book_url(vehicle)

    response = renter_http.get(url)
    assert response.status_code == 200
    assert response.context['wizard'].current_step.id == 'dates'

    assert renter_http.post(url, dates_payload(today)).status_code == 302
    assert renter_http.post(url, {'action': 'next', 'gps': 'on'}).status_code == 302

    response = renter_http.get(url)
    assert response.context['wizard'].current_step.id == 'review'
    assert response.context['quote'].total == Decimal('150')

    response = renter_http.post(url, {'action': 'submit'})
    reservation = Reservation.objects.get()
    assert response.status_code == 302
    assert response.url == reverse('reservations:confirmation', args=[reservation.pk])
    assert reservation.client == renter
    assert reservation.status == ReservationStatus.CONFIRMED
    assert str(reservation.total_price) == '150.00'
    assert reservation.gps and not reservation.full_insurance
    assert len(mail.outbox) == 1

    # Wizard state is cleared after submission
    assert renter_http.get(url).context['wizard'].current_index == 0


@pytest.mark.parametrize('start_in,days,error', [
    (-2, 5, 'cannot be in the past'),
    (3, 0, 'must be after the pick-up date'),
    (3, -2, 'must be after the pick-up date'),
])
def test_bad_dates_are_refused_at_submission(renter_http, vehicle, today, start_in, days, error):
    url = book_url(vehicle)
    # Date order and past dates are only checked once the booking is submitted
    assert renter_http.post(url, dates_payload(today, start_in=start_in, days=days)).status_code == 302
    assert renter_http.post(url, {'action': 'next'}).status_code == 302

    response = renter_http.post(url, {'action': 'submit'})
    assert response.status_code == 200
    assert response.context['wizard'].current_step.id == 'review'
    assert error in ' '.join(str(m) for m in response.context['messages'])
    assert not Reservation.objects.exists()


def test_dates_step_blocks_reserved_dates(renter_http, vehicle, make_reservation, today):
    make_reservation(start=today + timedelta(days=4), end=today + timedelta(days=6))
    response = renter_http.post(book_url(vehicle), dates_payload(today, start_in=3, days=5))
    assert response.status_code == 200
    assert 'already reserved' in str(response.context['form'].non_field_errors())


def test_previous_on_first_step_cancels(renter_http, vehicle):
    response = renter_http.post(book_url(vehicle), {'action': 'previous'})
    assert response.status_code == 302
    assert response.url == reverse('vehicles:detail', args=[vehicle.pk])


def test_cancel_clears_entered_values(renter_http, vehicle, today):
    url = book_url(vehicle)
    renter_http.post(url, dates_payload(today))
    renter_http.post(url, {'action': 'cancel'})
    response = renter_http.get(url)
    assert response.context['wizard'].current_index == 0
    assert not response.context['form'].initial


def test_conflict_at_submission_is_reported(renter_http, vehicle, make_reservation, today):
    url = book_url(vehicle)
    renter_http.post(url, dates_payload(today))
    renter_http.post(url, {'action': 'next'})
    # Someone else takes the car while the client is on the review step
    make_reservation(start=today + timedelta(days=3), end=today + timedelta(days=8))

    response = renter_http.post(url, {'action': 'submit'})
    assert response.status_code == 200
    assert Reservation.objects.count() == 1
    assert response.context['wizard'].current_step.id == 'dates'


def test_unavailable_vehicle_cannot_be_booked(renter_http, make_vehicle):
    vehicle = make_vehicle(is_available=False)
    response = renter_http.get(book_url(vehicle))
    assert response.status_code == 302
    assert response.url == reverse('vehicles:detail', args=[vehicle.pk])


def test_booking_requires_client_login(client, vehicle):
    response = client.get(book_url(vehicle))
    assert response.status_code == 302
    assert response.url.startswith(reverse('accounts:login'))


def test_staff_cannot_book(staff_http, vehicle):
    assert staff_http.get(book_url(vehicle)).status_code == 302


def test_confirmation_is_private_to_its_client(client, make_renter, make_reservation):
    reservation = make_reservation()
    other = make_renter(email='marie.martin@email.com', first_name='Marie', last_name='Martin')
    client.force_login(other.user)
    assert client.get(reverse('reservations:confirmation', args=[reservation.pk])).status_code == 404


def test_confirmation_page_shows_reference(renter_http, make_reservation):
    reservation = make_reservation()
    response = renter_http.get(reverse('reservations:confirmation', args=[reservation.pk]))
    assert response.status_code == 200
    assert reservation.reference in response.content.decode()


# ── Quote API ─────────────────────────────────────────────────────────────────

def test_quote_api_returns_itemised_total(client, vehicle):
    response = client.get(
        reverse('reservations:api_quote', args=[vehicle.pk]),
        {'start_date': '2030-01-20', 'end_date': '2030-01-25', 'gps': '1'},
    )
    data = response.json()
    assert response.status_code == 200
    assert data['total'] == '150.00'
    assert data['days'] == 5
    assert data['is_valid_range'] is True
    assert data['vehicle_available'] is True


def test_quote_api_flags_invalid_range(client, vehicle):
    data = client.get(
        reverse('reservations:api_quote', args=[vehicle.pk]),
        {'start_date': '2030-02-01', 'end_date': '2030-02-01'},
    ).json()
    assert data['total'] == '0.00'
    assert data['is_valid_range'] is False


def test_quote_api_reports_taken_dates(client, vehicle, make_reservation, today):
    reservation = make_reservation()
    data = client.get(
        reverse('reservations:api_quote', args=[vehicle.pk]),
        {'start_date': reservation.start_date.isoformat(), 'end_date': reservation.end_date.isoformat()},
    ).json()
    assert data['vehicle_available'] is False


def test_quote_api_requires_dates(client, vehicle):
    response = client.get(reverse('reservations:api_quote', args=[vehicle.pk]), {'start_date': 'tomorrow'})
    assert response.status_code == 400
