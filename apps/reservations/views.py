"""
Customer booking flow: 3-step wizard (dates, options, review) on top of
apps.core.wizard, plus a JSON quote endpoint used for the live total.
"""
import logging
from datetime import datetime

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.views.decorators.http import require_GET

from apps.accounts.decorators import client_required
from apps.core.wizard import Step
from apps.core.wizard_views import run_form_wizard
from apps.vehicles.models import Vehicle

from . import engine, pricing
from .exceptions import ReservationError
from .forms import RentalDatesForm, RentalOptionsForm
from .models import Reservation

logger = logging.getLogger(__name__)

BOOKING_STEPS = [
    Step('dates', 'Dates', 'Choose your pick-up and return dates',
         'reservations/steps/dates.html'),
    Step('options', 'Options', 'Add extras to your rental',
         'reservations/steps/options.html'),
    Step('review', 'Review', 'Check the details and confirm',
         'reservations/steps/review.html'),
]


def _parse_date(date_str: str):
    try:
        return datetime.strptime(date_str, '%Y-%m-%d').date()
    except (ValueError, TypeError):
        return None


@client_required
def book(request, vehicle_id):
    vehicle = get_object_or_404(Vehicle.objects.select_related('agency'), pk=vehicle_id)
    if not vehicle.is_available:
        messages.error(request, 'This vehicle is not available for rental at the moment.')
        return redirect('vehicles:detail', pk=vehicle.pk)

    client = request.client

    def create(cleaned):
        reservation = engine.create_reservation(
            vehicle=vehicle,
            client=client,
            start_date=cleaned['start_date'],
            end_date=cleaned['end_date'],
            options={key: cleaned.get(key, False) for key in pricing.OPTION_DAILY_PRICES},
            changed_by=request.user.get_username(),
        )
        messages.success(request, f'Reservation {reservation.reference} confirmed.')
        return redirect('reservations:confirmation', pk=reservation.pk)

    def summary(cleaned):
        start, end = cleaned.get('start_date'), cleaned.get('end_date')
        if start is None or end is None:
            return {'vehicle': vehicle, 'quote': None}
        return {
            'vehicle': vehicle,
            'quote': pricing.quote(vehicle.daily_rate, start, end, cleaned),
        }

    return run_form_wizard(
        request,
        name=f'booking_{vehicle.pk}',
        title=f'Book the {vehicle.display_name}',
        description='Reserve this vehicle in three steps.',
        steps=BOOKING_STEPS,
        form_classes={'dates': RentalDatesForm, 'options': RentalOptionsForm},
        form_kwargs={'dates': {'vehicle': vehicle}},
        on_done=create,
        cancel_url=reverse('vehicles:detail', args=[vehicle.pk]),
        error_message='An error occurred while creating the reservation. Please try again.',
        handled_errors=(ReservationError,),
        context_builder=summary,
    )


@client_required
def confirmation(request, pk):
    reservation = get_object_or_404(
        Reservation.objects.select_related('vehicle', 'vehicle__agency'),
        pk=pk, client=request.client,
    )
    return render(request, 'reservations/confirmation.html', {
        'reservation': reservation,
        'quote': reservation.price_quote(),
    })


@require_GET
def api_quote(request, vehicle_id):
    """
    GET ?start_date=YYYY-MM-DD&end_date=YYYY-MM-DD&gps=1&child_seat=1...
    Returns the itemised price; `is_valid_range` is false when end <= start.
    """
    vehicle = get_object_or_404(Vehicle, pk=vehicle_id)
    start = _parse_date(request.GET.get('start_date'))
    end = _parse_date(request.GET.get('end_date'))
    if start is None or end is None:
        return JsonResponse({'error': 'start_date and end_date are required (YYYY-MM-DD).'}, status=400)

    options = {
        key: request.GET.get(key, '').lower() in ('1', 'true', 'on', 'yes')
        for key in pricing.OPTION_DAILY_PRICES
    }
    data = pricing.quote(vehicle.daily_rate, start, end, options).as_dict()
    data['vehicle_available'] = vehicle.is_available and engine.is_vehicle_free(vehicle, start, end)
    return JsonResponse(data)
