"""Vehicle management views for the back-office."""
import logging
from django.contrib import messages
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from apps.accounts.decorators import staff_required
from apps.core.wizard import Step
from apps.core.wizard_views import run_form_wizard
from apps.vehicles.filters import filter_vehicles
from apps.vehicles.models import Vehicle, VehicleCategory
from .forms import (
    VehicleBasicForm, VehicleDetailsForm, VehicleEquipmentForm, VehicleForm, VehicleSpecsForm,
)

logger = logging.getLogger(__name__)

VEHICLE_STEPS = [
    Step('basic', 'Basic information', 'Brand, model and category',
         'dashboard/wizard_steps/form.html'),
    Step('specs', 'Specifications', 'Fuel, gearbox, seats and price',
         'dashboard/wizard_steps/form.html'),
    Step('details', 'Details', 'Mileage, year and description',
         'dashboard/wizard_steps/form.html'),
    Step('equipment', 'Equipment', 'On-board equipment',
         'dashboard/wizard_steps/form.html'),
    Step('review', 'Review', 'Check before adding the vehicle',
         'dashboard/wizard_steps/vehicle_review.html'),
]


@staff_required
def vehicle_list(request):
    vehicles = (
        filter_vehicles(request.GET, public=False)
        .select_related('agency')
        .order_by('brand', 'model')
    )
    return render(request, 'dashboard/vehicles/list.html', {
        'vehicles':   vehicles,
        'categories': VehicleCategory.choices,
        'filters':    request.GET,
        'page': 'vehicles',
    })


@staff_required
def vehicle_create(request):
    def create(cleaned):
        vehicle = Vehicle.objects.create(
            brand=cleaned['brand'],
            model=cleaned['model'],
            category=cleaned['category'],
            agency=cleaned.get('agency'),
            fuel=cleaned['fuel'],
            transmission=cleaned['transmission'],
            seats=cleaned['seats'],
            daily_rate=cleaned['daily_rate'],
            mileage=cleaned['mileage'],
            year=cleaned['year'],
            description=cleaned.get('description', ''),
            is_available=cleaned.get('is_available', False),
            equipment=list(cleaned.get('equipment', [])),
        )
        logger.info('Vehicle %s added by %s', vehicle, request.user.get_username())
        messages.success(request, f'Vehicle "{vehicle.display_name}" added to the fleet.')
        return redirect('dashboard:vehicle_list')

    return run_form_wizard(
        request,
        name='vehicle_create',
        title='New vehicle',
        description='Add a vehicle to the rental fleet.',
        steps=VEHICLE_STEPS,
        form_classes={
            'basic': VehicleBasicForm,
            'specs': VehicleSpecsForm,
            'details': VehicleDetailsForm,
            'equipment': VehicleEquipmentForm,
        },
        on_done=create,
        cancel_url=reverse('dashboard:vehicle_list'),
        error_message='An error occurred while adding the vehicle.',
        context_builder=lambda cleaned: {'page': 'vehicles'},
    )


@staff_required
def vehicle_edit(request, pk):
    vehicle = get_object_or_404(Vehicle, pk=pk)
    form = VehicleForm(request.POST or None, request.FILES or None, instance=vehicle)
    if request.method == 'POST' and form.is_valid():
        form.save()
        messages.success(request, f'Vehicle "{vehicle.display_name}" updated.')
        return redirect('dashboard:vehicle_list')
    return render(request, 'dashboard/vehicles/form.html', {
        'form':    form,
        'title':   f'Edit vehicle — {vehicle.display_name}',
        'vehicle': vehicle,
        'page': 'vehicles',
    })


@require_POST
@staff_required
def vehicle_toggle(request, pk):
    vehicle = get_object_or_404(Vehicle, pk=pk)
    vehicle.is_available = not vehicle.is_available
    vehicle.save(update_fields=['is_available', 'updated_at'])
    state = 'available' if vehicle.is_available else 'unavailable'
    messages.success(request, f'Vehicle "{vehicle.display_name}" is now {state}.')
    return redirect('dashboard:vehicle_list')


@require_POST
@staff_required
def vehicle_delete(request, pk):
    vehicle = get_object_or_404(Vehicle, pk=pk)
    vehicle.delete()
    logger.info('Vehicle %s archived by %s', vehicle, request.user.get_username())
    messages.success(request, f'Vehicle "{vehicle.display_name}" removed from the fleet.')
    return redirect('dashboard:vehicle_list')
