"""
Client area: dashboard, reservations, invoices, profile and reviews.
Every view is scoped to request.client (set by client_required).
"""
import logging

from django.contrib import messages
from django.db import IntegrityError, transaction
from django.shortcuts import get_object_or_404, redirect, render

from apps.accounts.decorators import client_required
from apps.core.pdf import PDFRenderError, render_pdf_response
from apps.payments.invoices import (
    Invoice, client_invoices, get_invoice_context, invoice_years,
)
from apps.payments.models import PaymentStatus
from apps.reservations.models import Reservation, ReservationStatus, ACTIVE_STATUSES
from apps.reviews.forms import ReviewForm

from .forms import ProfileForm

logger = logging.getLogger(__name__)


def _client_reservations(client):
    return (
        Reservation.objects
        .filter(client=client)
        .select_related('vehicle', 'vehicle__agency')
        .order_by('-created_at')
    )


@client_required
def dashboard(request):
    client = request.client
    reservations = _client_reservations(client)
    return render(request, 'clients/dashboard.html', {
        'client': client,
        'active_count': reservations.filter(status__in=ACTIVE_STATUSES).count(),
        'completed_count': reservations.filter(status=ReservationStatus.COMPLETED).count(),
        'total_count': reservations.count(),
        'recent_reservations': reservations[:3],
        'page': 'dashboard',
    })


@client_required
def reservation_list(request):
    reservations = _client_reservations(request.client).select_related('review')
    status_filter = request.GET.get('status', '')
    if status_filter in ReservationStatus.values:
        reservations = reservations.filter(status=status_filter)
    return render(request, 'clients/reservations.html', {
        'reservations': reservations,
        'statuses': ReservationStatus.choices,
        'status_filter': status_filter,
        'page': 'reservations',
    })


@client_required
def reservation_detail(request, pk):
    reservation = get_object_or_404(_client_reservations(request.client), pk=pk)
    return render(request, 'clients/reservation_detail.html', {
        'reservation': reservation,
        'quote': reservation.price_quote(),
        'has_review': hasattr(reservation, 'review'),
        'page': 'reservations',
    })


@client_required
def invoice_list(request):
    invoices = client_invoices(request.client, request.GET)
    return render(request, 'clients/invoices.html', {
        'invoices': invoices,
        'total': sum((inv.amount for inv in invoices), 0),
        'years': invoice_years(request.client),
        'statuses': PaymentStatus.choices,
        'filters': request.GET,
        'page': 'invoices',
    })


@client_required
def invoice_pdf(request, pk):
    reservation = get_object_or_404(_client_reservations(request.client), pk=pk)
    payment = reservation.payments.order_by('-created_at').first()
    invoice = Invoice(reservation=reservation, payment=payment)
    try:
        return render_pdf_response(
            'payments/invoice_pdf.html',
            get_invoice_context(invoice),
            f'{invoice.number}.pdf',
        )
    except PDFRenderError:
        messages.error(request, 'An error occurred while generating the invoice.')
        return redirect('clients:invoices')


@client_required
def profile(request):
    form = ProfileForm(request.POST or None, instance=request.client)
    if request.method == 'POST' and form.is_valid():
        form.save()
        messages.success(request, 'Your profile has been updated.')
        return redirect('clients:profile')
    return render(request, 'clients/profile.html', {
        'form': form,
        'client': request.client,
        'page': 'profile',
    })


@client_required
def review_create(request, pk):
    """Leave a review on one of the client's own COMPLETED reservations, once."""
    reservation = get_object_or_404(_client_reservations(request.client), pk=pk)
    if not reservation.is_reviewable:
        messages.error(request, 'You can only review a completed rental.')
        return redirect('clients:reservation_detail', pk=reservation.pk)
    if hasattr(reservation, 'review'):
        messages.info(request, 'You have already reviewed this rental.')
        return redirect('clients:reservation_detail', pk=reservation.pk)

    form = ReviewForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        review = form.save(commit=False)
        review.client = request.client
        review.vehicle = reservation.vehicle
        review.reservation = reservation
        try:
            with transaction.atomic():
                review.save()
        except IntegrityError:
            # Double submit: the one-review-per-reservation constraint fired
            messages.info(request, 'You have already reviewed this rental.')
            return redirect('clients:reservation_detail', pk=reservation.pk)
        logger.info('Review %s left on reservation %s', review.rating, reservation.reference)
        messages.success(request, 'Thank you for your review!')
        return redirect('clients:reservation_detail', pk=reservation.pk)

    return render(request, 'clients/review_form.html', {
        'form': form,
        'reservation': reservation,
        'page': 'reservations',
    })
