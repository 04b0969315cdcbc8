import pytest
from django.contrib.auth import get_user_model
from django.core import mail
from django.urls import reverse

from apps.clients.models import Client

pytestmark = pytest.mark.django_db

User = get_user_model()


def test_client_login_lands_in_client_area(client, renter):
    response = client.post(reverse('accounts:login'), {
        'email': 'Jean.Dupont@email.com', 'password': 'client123',
    })
    assert response.status_code == 302
    assert response.url == reverse('clients:dashboard')


def test_staff_login_lands_in_back_office(client, employee):
    response = client.post(reverse('accounts:login'), {
        'email': 'employe@agence.com', 'password': 'staff123',
    })
    assert response.url == reverse('dashboard:overview')


def test_login_follows_safe_next(client, renter):
    response = client.post(reverse('accounts:login'), {
        'email': 'jean.dupont@email.com', 'password': 'client123', 'next': '/client/invoices/',
    })
    assert response.url == '/client/invoices/'


def test_login_ignores_external_next(client, renter):
    response = client.post(reverse('accounts:login'), {
        'email': 'jean.dupont@email.com', 'password': 'client123', 'next': 'https://evil.example/',
    })
    assert response.url == reverse('clients:dashboard')


def test_invalid_login_stays_on_page(client, renter):
    response = client.post(reverse('accounts:login'), {
        'email': 'jean.dupont@email.com', 'password': 'wrong',
    })
    assert response.status_code == 200
    assert '_auth_user_id' not in client.session


def test_logout_requires_post(renter_http):
    assert renter_http.get(reverse('accounts:logout')).status_code == 405
    response = renter_http.post(reverse('accounts:logout'))
    assert response.url == reverse('pages:home')
    assert '_auth_user_id' not in renter_http.session


REGISTRATION = {
    'first_name': 'Marie',
    'last_name': 'Martin',
    'email': 'Marie.Martin@email.com',
    'phone': '+33 6 12 34 56 78',
    'licence_number': '987654321',
    'password1': 'voiture2030',
    'password2': 'voiture2030',
}


def test_register_creates_client_and_logs_in(client):
    response = client.post(reverse('accounts:register'), REGISTRATION)

    assert response.status_code == 302
    assert response.url == reverse('clients:dashboard')
    new_client = Client.objects.get(email='marie.martin@email.com')
    assert new_client.phone == '0612345678'
    assert new_client.loyalty_points == 0
    assert new_client.user.check_password('voiture2030')
    assert not new_client.user.is_staff
    assert int(client.session['_auth_user_id']) == new_client.user.pk

    assert len(mail.outbox) == 1
    assert mail.outbox[0].to == ['marie.martin@email.com']


def test_register_refuses_taken_email(client, renter):
    data = {**REGISTRATION, 'email': 'jean.dupont@email.com'}
    response = client.post(reverse('accounts:register'), data)
    assert response.status_code == 200
    assert 'email' in response.context['form'].errors
    assert Client.objects.count() == 1


@pytest.mark.parametrize('field, value', [
    ('password2', 'different1'),
    ('phone', '12345'),
])
def test_register_validates_fields(client, field, value):
    response = client.post(reverse('accounts:register'), {**REGISTRATION, field: value})
    assert field in response.context['form'].errors
    assert not User.objects.exists()
