from django.shortcuts import get_object_or_404, render

from apps.accounts.decorators import get_client
from apps.reservations.pricing import OPTION_DAILY_PRICES, OPTION_LABELS
from .filters import filter_vehicles, with_rating
from .models import FuelType, Transmission, Vehicle, VehicleCategory


def vehicle_list(request):
    """Public catalogue with category / fuel / transmission / price filters."""
    vehicles = with_rating(
        filter_vehicles(request.GET).select_related('agency')
    ).order_by('daily_rate', 'brand')
    return render(request, 'vehicles/list.html', {
        'vehicles': vehicles,
        'categories': VehicleCategory.choices,
        'fuels': FuelType.choices,
        'transmissions': Transmission.choices,
        'filters': request.GET,
    })


def vehicle_detail(request, pk):
    vehicle = get_object_or_404(Vehicle.objects.select_related('agency'), pk=pk)
    reviews = (
        vehicle.reviews
        .filter(is_published=True)
        .select_related('client')
        .order_by('-created_at')
    )
    return render(request, 'vehicles/detail.html', {
        'vehicle': vehicle,
        'reviews': reviews,
        'average_rating': vehicle.average_rating(),
        'options': [(OPTION_LABELS[k], price) for k, price in OPTION_DAILY_PRICES.items()],
        'can_book': vehicle.is_available and get_client(request.user) is not None,
    })
