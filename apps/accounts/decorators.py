"""
Role decorators for function-based views.

Unauthenticated or wrong-role requests are redirected to the login page
(settings.LOGIN_URL), preserving the ?next= URL for post-login redirect.

  client_required      user has a Client profile (client area)
  staff_required       user is staff (back-office)
  admin_role_required  staff with Employee role ADMIN, or a superuser
"""
from functools import wraps
from urllib.parse import quote

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect


def _login_redirect(request):
    return redirect(f'{settings.LOGIN_URL}?next={quote(request.get_full_path())}')


def get_client(user):
    """The user's Client profile, or None."""
    if not user.is_authenticated:
        return None
    return getattr(user, 'client', None)


def get_employee(user):
    if not user.is_authenticated:
        return None
    return getattr(user, 'employee', None)


def is_admin_role(user) -> bool:
    if not user.is_authenticated or not user.is_staff:
        return False
    if user.is_superuser:
        return True
    employee = get_employee(user)
    return employee is not None and employee.is_admin


def client_required(view_func):
    """Require a logged-in user with a Client profile; attaches request.client."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        client = get_client(request.user)
        if client is None:
            return _login_redirect(request)
        request.client = client
        return view_func(request, *args, **kwargs)
    return wrapper


def staff_required(view_func):
    """Require is_authenticated + is_staff. Redirect to login otherwise."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated or not request.user.is_staff:
            return _login_redirect(request)
        return view_func(request, *args, **kwargs)
    return wrapper


def admin_role_required(view_func):
    """
    Require an administrator. Anonymous users go to the login page; staff
    without the ADMIN role go back to the overview with an error message.
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated or not request.user.is_staff:
            return _login_redirect(request)
        if not is_admin_role(request.user):
            messages.error(request, 'This section is reserved for administrators.')
            return redirect('dashboard:overview')
        return view_func(request, *args, **kwargs)
    return wrapper
