"""
Back-office reporting. Aggregation only, no HTTP awareness.

Public API:
  resolve_period(key)                   -> (key, label, start datetime or None)
  occupancy_rate(today=None)            -> int percent
  build_report(period_key, now=None)    -> dict used by the page, PDF and CSV
  monthly_revenue(months=12, now=None)  -> [{'month': 'YYYY-MM', 'revenue': float}, ...]
  write_csv(report, fileobj)

Cancelled reservations are left out of reservation counts and revenue
figures; revenue itself is the sum of PAID payments.
"""
import csv
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db.models import Avg, Count, Q, Sum
from django.db.models.functions import TruncMonth
from django.utils import timezone

from apps.clients.models import Client
from apps.payments.models import Payment, PaymentStatus
from apps.reservations.models import Reservation, ReservationStatus
from apps.reviews.models import Review
from apps.vehicles.models import Vehicle, VehicleCategory

DEFAULT_PERIOD = '30d'
TOP_VEHICLES = 5


def resolve_period(key, now=None):
    periods = settings.REPORT_PERIODS
    if key not in periods:
        key = DEFAULT_PERIOD
    label, days = periods[key]
    now = now or timezone.now()
    start = now - timedelta(days=days) if days is not None else None
    return key, label, start


def occupancy_rate(today=None) -> int:
    """Percentage of fleet vehicles out on a rental today."""
    today = today or timezone.localdate()
    fleet = Vehicle.objects.count()
    if not fleet:
        return 0
    out = (
        Reservation.objects.active()
        .filter(start_date__lte=today, end_date__gt=today, vehicle__archived_at__isnull=True)
        .values('vehicle').distinct().count()
    )
    return round(out * 100 / fleet)


def build_report(period_key=DEFAULT_PERIOD, now=None) -> dict:
    now = now or timezone.now()
    key, label, start = resolve_period(period_key, now)

    reservations = Reservation.objects.exclude(status=ReservationStatus.CANCELLED)
    payments = Payment.objects.filter(status=PaymentStatus.PAID)
    clients = Client.objects.all()
    if start is not None:
        reservations = reservations.filter(created_at__gte=start)
        payments = payments.filter(paid_on__gte=start)
        clients = clients.filter(created_at__gte=start)

    average_rating = Review.objects.filter(is_published=True).aggregate(avg=Avg('rating'))['avg']

    top_vehicles = [
        {
            'vehicle': vehicle,
            'reservations': vehicle.period_reservations,
            'revenue': vehicle.period_revenue or Decimal('0'),
        }
        for vehicle in (
            Vehicle.all_objects
            .annotate(
                period_reservations=Count('reservations', filter=Q(reservations__in=reservations)),
                period_revenue=Sum('reservations__total_price', filter=Q(reservations__in=reservations)),
            )
            .filter(period_reservations__gt=0)
            .order_by('-period_reservations', '-period_revenue', 'brand')[:TOP_VEHICLES]
        )
    ]

    per_category = {
        row['vehicle__category']: row
        for row in (
            reservations.order_by()
            .values('vehicle__category')
            .annotate(count=Count('id'), revenue=Sum('total_price'))
        )
    }
    fleet_by_category = dict(
        Vehicle.objects.order_by().values_list('category').annotate(n=Count('id'))
    )
    categories = [
        {
            'category': value,
            'label': label_,
            'vehicles': fleet_by_category.get(value, 0),
            'reservations': per_category.get(value, {}).get('count', 0),
            'revenue': per_category.get(value, {}).get('revenue') or Decimal('0'),
        }
        for value, label_ in VehicleCategory.choices
        if fleet_by_category.get(value) or value in per_category
    ]

    return {
        'period': key,
        'period_label': label,
        'start': start,
        'generated_at': now,
        'reservations': reservations.count(),
        'revenue': payments.aggregate(total=Sum('amount'))['total'] or Decimal('0'),
        'new_clients': clients.count(),
        'occupancy_rate': occupancy_rate(timezone.localtime(now).date()),
        'average_rating': round(average_rating, 1) if average_rating is not None else 0,
        'top_vehicles': top_vehicles,
        'categories': categories,
        'status_counts': _status_counts(start),
    }


def _status_counts(start) -> list:
    qs = Reservation.objects.all()
    if start is not None:
        qs = qs.filter(created_at__gte=start)
    counts = dict(qs.order_by().values_list('status').annotate(n=Count('id')))
    return [
        {'status': value, 'label': label, 'count': counts.get(value, 0)}
        for value, label in ReservationStatus.choices
    ]


def monthly_revenue(months=12, now=None) -> list:
    """PAID payment totals per calendar month, oldest first, zero-filled."""
    now = timezone.localtime(now or timezone.now())
    first_month = now.date().replace(day=1)
    for _ in range(months - 1):
        first_month = (first_month - timedelta(days=1)).replace(day=1)

    totals = {
        row['month'].strftime('%Y-%m'): row['total']
        for row in (
            Payment.objects
            .filter(status=PaymentStatus.PAID, paid_on__date__gte=first_month)
            .annotate(month=TruncMonth('paid_on'))
            .order_by()
            .values('month')
            .annotate(total=Sum('amount'))
        )
    }

    data, month = [], first_month
    for _ in range(months):
        key = month.strftime('%Y-%m')
        data.append({'month': key, 'revenue': float(totals.get(key) or 0)})
        month = (month + timedelta(days=32)).replace(day=1)
    return data


def write_csv(report: dict, fileobj) -> None:
    writer = csv.writer(fileobj)
    writer.writerow(['AutoLoc report', report['period_label']])
    writer.writerow(['Generated at', timezone.localtime(report['generated_at']).strftime('%d/%m/%Y %H:%M')])
    writer.writerow([])
    writer.writerow(['Indicator', 'Value'])
    writer.writerow(['Reservations', report['reservations']])
    writer.writerow([f'Revenue ({settings.RENTAL_CURRENCY})', report['revenue']])
    writer.writerow(['New clients', report['new_clients']])
    writer.writerow(['Occupancy rate (%)', report['occupancy_rate']])
    writer.writerow(['Average rating', report['average_rating']])
    writer.writerow([])
    writer.writerow(['Top vehicles', 'Reservations', 'Revenue'])
    for row in report['top_vehicles']:
        writer.writerow([row['vehicle'].display_name, row['reservations'], row['revenue']])
    writer.writerow([])
    writer.writerow(['Category', 'Vehicles', 'Reservations', 'Revenue'])
    for row in report['categories']:
        writer.writerow([row['label'], row['vehicles'], row['reservations'], row['revenue']])
