"""
Login / logout / registration.

One login page serves both audiences: clients land in the client area,
staff in the back-office, unless a safe ?next= URL says otherwise.
"""
import logging

from django.contrib import messages
from django.contrib.auth import authenticate, login, logout
from django.db import transaction
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from apps.notifications.emails import send_welcome
from .decorators import get_client
from .forms import RegistrationForm

logger = logging.getLogger(__name__)


def _home_for(user) -> str:
    if user.is_staff:
        return 'dashboard:overview'
    if get_client(user) is not None:
        return 'clients:dashboard'
    return 'pages:home'


def _safe_next(request) -> str:
    next_url = request.POST.get('next', '') or request.GET.get('next', '')
    if next_url and url_has_allowed_host_and_scheme(
        next_url, allowed_hosts={request.get_host()}, require_https=request.is_secure(),
    ):
        return next_url
    return ''


def login_view(request):
    if request.user.is_authenticated:
        return redirect(_safe_next(request) or _home_for(request.user))

    if request.method == 'POST':
        email = request.POST.get('email', '').strip().lower()
        password = request.POST.get('password', '')
        user = authenticate(request, username=email, password=password)
        if user is not None:
            login(request, user)
            logger.info('User %s logged in', email)
            return redirect(_safe_next(request) or _home_for(user))
        messages.error(request, 'Invalid email or password.')

    return render(request, 'accounts/login.html', {
        'next': request.GET.get('next', ''),
    })


@require_POST
def logout_view(request):
    logout(request)
    messages.success(request, 'You have been logged out.')
    return redirect('pages:home')


def register(request):
    if request.user.is_authenticated:
        return redirect(_home_for(request.user))

    form = RegistrationForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        with transaction.atomic():
            client = form.save()
        logger.info('Client account created for %s', client.email)
        send_welcome(client)
        login(request, client.user, backend='django.contrib.auth.backends.ModelBackend')
        messages.success(request, f'Welcome {client.first_name}! Your account has been created.')
        return redirect('clients:dashboard')

    return render(request, 'accounts/register.html', {'form': form})
