"""
Invoice data logic.

There is no separate invoice table: every reservation is invoiced once, and
the invoice status is the status of its most recent payment (PENDING when
nothing has been recorded yet).
"""
from dataclasses import dataclass

from django.conf import settings
from django.db.models import Prefetch, Q

from apps.reservations.models import Reservation
from .models import Payment, PaymentStatus


def invoice_number(reservation) -> str:
    """INV-<year of booking>-<reservation reference without the QR prefix>."""
    ref = reservation.reference[2:] if reservation.reference.startswith('QR') else reservation.reference
    return f"INV-{reservation.created_on.year}-{ref}"


@dataclass
class Invoice:
    reservation: Reservation
    payment: Payment = None

    @property
    def number(self):
        return invoice_number(self.reservation)

    @property
    def issued_on(self):
        return self.reservation.created_on

    @property
    def amount(self):
        return self.reservation.total_price

    @property
    def status(self):
        return self.payment.status if self.payment else PaymentStatus.PENDING

    @property
    def status_label(self):
        return PaymentStatus(self.status).label

    @property
    def status_badge_class(self):
        return self.payment.status_badge_class if self.payment else 'badge-pending'


def client_invoices(client, params=None):
    """
    Invoices of a client, newest first, filtered by GET-style params:
      status   PaymentStatus value
      q        search on invoice number or vehicle brand/model
      year     year the reservation was made
    """
    params = params or {}
    qs = (
        Reservation.objects
        .filter(client=client)
        .select_related('vehicle')
        .prefetch_related(Prefetch('payments', queryset=Payment.objects.order_by('-created_at')))
        .order_by('-created_at')
    )

    year = str(params.get('year', '')).strip()
    if year.isdigit():
        qs = qs.filter(created_at__year=int(year))

    search = str(params.get('q', '')).strip()
    if search:
        # Invoice numbers embed the reservation reference
        ref_part = search.upper().rsplit('-', 1)[-1]
        qs = qs.filter(
            Q(reference__icontains=ref_part)
            | Q(vehicle__brand__icontains=search)
            | Q(vehicle__model__icontains=search)
        )

    invoices = [Invoice(reservation=r, payment=next(iter(r.payments.all()), None)) for r in qs]

    status = params.get('status', '')
    if status in PaymentStatus.values:
        invoices = [inv for inv in invoices if inv.status == status]
    return invoices


def invoice_years(client):
    dates = Reservation.objects.filter(client=client).dates('created_at', 'year', order='DESC')
    return [d.year for d in dates]


def get_invoice_context(invoice: Invoice) -> dict:
    """Context for invoice_pdf.html."""
    reservation = invoice.reservation
    vehicle = reservation.vehicle
    agency = vehicle.agency
    client = reservation.client
    return {
        'invoice': invoice,
        'reservation': reservation,
        'quote': reservation.price_quote(),
        'business': {
            'name': 'AutoLoc',
            'email': settings.DEFAULT_FROM_EMAIL,
            'agency': agency.name if agency else '',
            'address': agency.address if agency else '',
            'phone': agency.phone if agency else '',
        },
        'client': {
            'name': client.full_name,
            'email': client.email,
            'phone': client.phone,
            'address': client.address,
        },
        'currency': settings.RENTAL_CURRENCY,
    }
