"""
Query-string filtering shared by the public catalogue and the back-office
vehicle list.
"""
from decimal import Decimal, InvalidOperation

from django.db.models import Avg, Q

from .models import FuelType, Transmission, Vehicle, VehicleCategory

# Largest value daily_rate can hold (max_digits=8, decimal_places=2)
MAX_DAILY_RATE = Decimal('999999.99')


def filter_vehicles(params, qs=None, public=True):
    """
    Apply GET filters to a Vehicle queryset.

      q              text search on brand / model
      category       VehicleCategory value
      fuel           FuelType value
      transmission   Transmission value
      max_price      maximum daily rate
      availability   'available' / 'unavailable' (back-office only)

    Public listings only ever show available vehicles. Unknown choice values
    are ignored rather than producing an empty page.
    """
    qs = Vehicle.objects.all() if qs is None else qs
    if public:
        qs = qs.filter(is_available=True)

    search = params.get('q', '').strip()
    if search:
        qs = qs.filter(Q(brand__icontains=search) | Q(model__icontains=search))

    category = params.get('category', '')
    if category in VehicleCategory.values:
        qs = qs.filter(category=category)

    fuel = params.get('fuel', '')
    if fuel in FuelType.values:
        qs = qs.filter(fuel=fuel)

    transmission = params.get('transmission', '')
    if transmission in Transmission.values:
        qs = qs.filter(transmission=transmission)

    max_price = params.get('max_price', '').strip()
    if max_price:
        try:
            price = Decimal(max_price)
        except InvalidOperation:
            price = None
        # NaN and Infinity parse but cannot be compared against a DecimalField
        if price is not None and price.is_finite():
            price = min(max(price, Decimal('0')), MAX_DAILY_RATE)
            qs = qs.filter(daily_rate__lte=price)

    if not public:
        availability = params.get('availability', '')
        if availability == 'available':
            qs = qs.filter(is_available=True)
        elif availability == 'unavailable':
            qs = qs.filter(is_available=False)

    return qs


def with_rating(qs):
    """Annotate `rating_avg` (published reviews only) for list cards."""
    return qs.annotate(rating_avg=Avg('reviews__rating', filter=Q(reviews__is_published=True)))
