"""
Email notification service for AutoLoc.

All functions are synchronous (no task queue).
Called from the reservation engine and the accounts views after state changes.

Public API:
  send_reservation_confirmed(reservation)
  send_reservation_cancelled(reservation, reason='')
  send_welcome(client)
"""
import logging
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)


def _reservation_context(reservation) -> dict:
    """Common template context for all reservation emails."""
    vehicle = reservation.vehicle
    agency = vehicle.agency
    return {
        'client_name':    reservation.client.full_name,
        'vehicle_name':   vehicle.display_name,
        'agency_name':    agency.name if agency else '',
        'agency_address': agency.address if agency else '',
        'agency_phone':   agency.phone if agency else '',
        'opening_hours':  agency.opening_hours if agency else '',
        'start_date':     reservation.start_date,
        'end_date':       reservation.end_date,
        'days':           reservation.days,
        'options':        reservation.price_quote().lines,
        'total_price':    reservation.total_price,
        'reference':      reservation.reference,
        'detail_url':     _detail_url(reservation),
        'support_email':  settings.DEFAULT_FROM_EMAIL,
    }


def _detail_url(reservation) -> str:
    """Full URL of the reservation page in the client area."""
    base = getattr(settings, 'SITE_URL', 'http://127.0.0.1:8000')
    return f"{base}/client/reservations/{reservation.id}/"


def _send(subject: str, to_email: str, html_template: str, txt_template: str, context: dict):
    """Low-level send helper: builds multipart email with HTML + text fallback."""
    if not to_email:
        logger.warning('Email skipped, no email address (reference %s)', context.get('reference'))
        return

    try:
        text_body = render_to_string(txt_template, context)
        html_body = render_to_string(html_template, context)

        msg = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[to_email],
        )
        msg.attach_alternative(html_body, 'text/html')
        msg.send(fail_silently=False)
        logger.info('Email "%s" sent to %s', subject, to_email)
    except Exception as exc:
        # Log but never break the reservation flow on an email failure
        logger.exception('Failed to send email "%s" to %s: %s', subject, to_email, exc)


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def send_reservation_confirmed(reservation):
    """
    Send the confirmation email with the pick-up reference.
    Triggered: reservation created.
    """
    _send(
        subject=(
            f'Reservation confirmed — {reservation.vehicle.display_name} '
            f'from {reservation.start_date.strftime("%d/%m/%Y")}'
        ),
        to_email=reservation.client.email,
        html_template='emails/reservation_confirmed.html',
        txt_template='emails/reservation_confirmed.txt',
        context=_reservation_context(reservation),
    )


def send_reservation_cancelled(reservation, reason: str = ''):
    ctx = _reservation_context(reservation)
    ctx['cancellation_reason'] = reason

    _send(
        subject=f'Reservation cancelled — {reservation.reference}',
        to_email=reservation.client.email,
        html_template='emails/reservation_cancelled.html',
        txt_template='emails/reservation_cancelled.txt',
        context=ctx,
    )


def send_welcome(client):
    _send(
        subject='Welcome to AutoLoc',
        to_email=client.email,
        html_template='emails/welcome.html',
        txt_template='emails/welcome.txt',
        context={
            'client_name': client.full_name,
            'catalogue_url': f"{getattr(settings, 'SITE_URL', 'http://127.0.0.1:8000')}/vehicles/",
            'support_email': settings.DEFAULT_FROM_EMAIL,
        },
    )
