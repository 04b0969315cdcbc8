"""
Back-office views: overview KPIs, reservations and clients.
Vehicles, agencies, employees, payments and reports live in views_*.py.
"""
import logging
from datetime import timedelta
from decimal import Decimal

from django.contrib import messages
from django.db.models import Count, Q, Sum
from django.http import JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.views.decorators.http import require_POST

from apps.accounts.decorators import staff_required
from apps.clients.models import Client, LoyaltyTier, loyalty_points_range
from apps.payments.models import Payment, PaymentStatus
from apps.reservations import engine
from apps.reservations.exceptions import ReservationError
from apps.reservations.forms import StatusChangeForm
from apps.reservations.models import Reservation, ReservationStatus, ACTIVE_STATUSES
from apps.vehicles.models import Vehicle

from .reports import monthly_revenue, occupancy_rate

logger = logging.getLogger(__name__)

LIST_PERIODS = {'7': 7, '30': 30, '90': 90}


# ─────────────────────────────────────────────────────────────────────────────
# Overview / KPI dashboard
# ─────────────────────────────────────────────────────────────────────────────

@staff_required
def overview(request):
    vehicles = Vehicle.objects.all()
    reservations = Reservation.objects.all()

    status_counts = dict(reservations.order_by().values_list('status').annotate(n=Count('id')))
    kpis = {
        'vehicles':            vehicles.count(),
        'vehicles_available':  vehicles.filter(is_available=True).count(),
        'active_reservations': reservations.filter(status__in=ACTIVE_STATUSES).count(),
        'revenue': Payment.objects.filter(status=PaymentStatus.PAID).aggregate(
            total=Sum('amount')
        )['total'] or Decimal('0'),
        'occupancy_rate': occupancy_rate(),
        'clients': Client.objects.count(),
    }

    recent_reservations = reservations.select_related('client', 'vehicle').order_by('-created_at')[:5]

    return render(request, 'dashboard/overview.html', {
        'kpis': kpis,
        'status_counts': [
            (label, status_counts.get(value, 0)) for value, label in ReservationStatus.choices
        ],
        'recent_reservations': recent_reservations,
        'page': 'overview',
    })


@staff_required
def revenue_data(request):
    """Monthly PAID revenue for the overview / reports charts."""
    try:
        months = min(max(int(request.GET.get('months', 12)), 1), 36)
    except ValueError:
        months = 12
    return JsonResponse({'months': monthly_revenue(months)})


# ─────────────────────────────────────────────────────────────────────────────
# Reservations
# ─────────────────────────────────────────────────────────────────────────────

@staff_required
def reservation_list(request):
    qs = Reservation.objects.select_related('client', 'vehicle').order_by('-created_at')

    status_filter = request.GET.get('status', '')
    period        = request.GET.get('period', '')
    search        = request.GET.get('q', '').strip()

    if status_filter in ReservationStatus.values:
        qs = qs.filter(status=status_filter)
    if period in LIST_PERIODS:
        qs = qs.filter(created_at__gte=timezone.now() - timedelta(days=LIST_PERIODS[period]))
    if search:
        qs = qs.filter(
            Q(reference__icontains=search) |
            Q(client__first_name__icontains=search) |
            Q(client__last_name__icontains=search) |
            Q(client__email__icontains=search) |
            Q(vehicle__brand__icontains=search) |
            Q(vehicle__model__icontains=search)
        )

    all_reservations = Reservation.objects.all()
    counts = dict(all_reservations.order_by().values_list('status').annotate(n=Count('id')))
    stats = {
        'total':       all_reservations.count(),
        'confirmed':   counts.get(ReservationStatus.CONFIRMED, 0),
        'in_progress': counts.get(ReservationStatus.IN_PROGRESS, 0),
        'completed':   counts.get(ReservationStatus.COMPLETED, 0),
        'cancelled':   counts.get(ReservationStatus.CANCELLED, 0),
        'revenue': all_reservations.filter(status=ReservationStatus.COMPLETED).aggregate(
            total=Sum('total_price')
        )['total'] or Decimal('0'),
    }

    return render(request, 'dashboard/reservations/list.html', {
        'reservations':   qs,
        'stats':          stats,
        'status_choices': ReservationStatus.choices,
        'periods':        LIST_PERIODS,
        'filters':        request.GET,
        'page': 'reservations',
    })


@staff_required
def reservation_detail(request, pk):
    reservation = get_object_or_404(
        Reservation.objects.select_related('client', 'vehicle', 'vehicle__agency'), pk=pk,
    )
    return render(request, 'dashboard/reservations/detail.html', {
        'reservation': reservation,
        'quote':       reservation.price_quote(),
        'status_logs': reservation.status_logs.all(),
        'payments':    reservation.payments.all(),
        'status_form': StatusChangeForm(reservation=reservation),
        'page': 'reservations',
    })


@require_POST
@staff_required
def reservation_status(request, pk):
    reservation = get_object_or_404(Reservation, pk=pk)
    form = StatusChangeForm(request.POST, reservation=reservation)
    if not form.is_valid():
        messages.error(request, 'This status change is not allowed.')
        return redirect('dashboard:reservation_detail', pk=pk)

    new_status = form.cleaned_data['status']
    try:
        engine.change_status(
            reservation, new_status,
            changed_by=request.user.get_username(),
            reason=form.cleaned_data['reason'],
        )
    except ReservationError as exc:
        messages.error(request, str(exc))
    else:
        messages.success(
            request,
            f'Reservation {reservation.reference} is now {ReservationStatus(new_status).label.lower()}.',
        )
    next_url = request.POST.get('next', '')
    if next_url == 'list':
        return redirect('dashboard:reservation_list')
    return redirect('dashboard:reservation_detail', pk=pk)


# ─────────────────────────────────────────────────────────────────────────────
# Clients
# ─────────────────────────────────────────────────────────────────────────────

@staff_required
def client_list(request):
    qs = Client.objects.annotate(reservation_count=Count('reservations')).order_by('last_name', 'first_name')

    search = request.GET.get('q', '').strip()
    tier   = request.GET.get('tier', '')

    if search:
        qs = qs.filter(
            Q(first_name__icontains=search) |
            Q(last_name__icontains=search) |
            Q(email__icontains=search) |
            Q(phone__icontains=search)
        )
    if tier in LoyaltyTier.values:
        low, high = loyalty_points_range(tier)
        qs = qs.filter(loyalty_points__gte=low)
        if high is not None:
            qs = qs.filter(loyalty_points__lt=high)

    today = timezone.localdate()
    vip_low, _ = loyalty_points_range(LoyaltyTier.VIP)
    gold_low, gold_high = loyalty_points_range(LoyaltyTier.GOLD)
    stats = {
        'total': Client.objects.count(),
        'vip':   Client.objects.filter(loyalty_points__gte=vip_low).count(),
        'gold':  Client.objects.filter(loyalty_points__gte=gold_low, loyalty_points__lt=gold_high).count(),
        'new_this_month': Client.objects.filter(
            created_at__year=today.year, created_at__month=today.month,
        ).count(),
    }

    return render(request, 'dashboard/clients/list.html', {
        'clients': qs,
        'stats':   stats,
        'tiers':   LoyaltyTier.choices,
        'filters': request.GET,
        'page': 'clients',
    })


@staff_required
def client_detail(request, pk):
    client = get_object_or_404(Client, pk=pk)
    return render(request, 'dashboard/clients/detail.html', {
        'client': client,
        'reservations': client.reservations.select_related('vehicle').order_by('-created_at'),
        'page': 'clients',
    })
