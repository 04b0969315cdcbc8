"""Agency management views. Creating and deleting agencies is reserved for administrators."""
import logging
from django.contrib import messages
from django.db.models import Count, Q
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from apps.accounts.decorators import admin_role_required, staff_required
from apps.agencies.models import Agency
from apps.core.wizard import Step
from apps.core.wizard_views import run_form_wizard
from .forms import AgencyBasicForm, AgencyContactForm, AgencyForm, AgencyHoursForm

logger = logging.getLogger(__name__)

AGENCY_STEPS = [
    Step('basic', 'Agency', 'Name and address', 'dashboard/wizard_steps/form.html'),
    Step('contact', 'Contact', 'Phone and email', 'dashboard/wizard_steps/form.html'),
    Step('hours', 'Opening hours', 'When clients can pick up vehicles',
         'dashboard/wizard_steps/form.html'),
    Step('review', 'Review', 'Check before creating the agency',
         'dashboard/wizard_steps/agency_review.html'),
]


@staff_required
def agency_list(request):
    agencies = Agency.objects.annotate(
        vehicle_count=Count('vehicles', filter=Q(vehicles__archived_at__isnull=True), distinct=True),
        employee_count=Count('employees', filter=Q(employees__archived_at__isnull=True), distinct=True),
    ).order_by('name')
    search = request.GET.get('q', '').strip()
    if search:
        agencies = agencies.filter(
            Q(name__icontains=search) | Q(address__icontains=search) | Q(email__icontains=search)
        )
    return render(request, 'dashboard/agencies/list.html', {
        'agencies': agencies,
        'filters':  request.GET,
        'page': 'agencies',
    })


@admin_role_required
def agency_create(request):
    def create(cleaned):
        agency = Agency.objects.create(
            name=cleaned['name'],
            address=cleaned['address'],
            phone=cleaned['phone'],
            email=cleaned['email'],
            opening_hours=cleaned['opening_hours'],
        )
        logger.info('Agency %s created by %s', agency.name, request.user.get_username())
        messages.success(request, f'Agency "{agency.name}" created.')
        return redirect('dashboard:agency_list')

    return run_form_wizard(
        request,
        name='agency_create',
        title='New agency',
        description='Open a new rental agency.',
        steps=AGENCY_STEPS,
        form_classes={
            'basic': AgencyBasicForm,
            'contact': AgencyContactForm,
            'hours': AgencyHoursForm,
        },
        on_done=create,
        cancel_url=reverse('dashboard:agency_list'),
        error_message='An error occurred while creating the agency.',
        context_builder=lambda cleaned: {'page': 'agencies'},
    )


@staff_required
def agency_edit(request, pk):
    agency = get_object_or_404(Agency, pk=pk)
    form = AgencyForm(request.POST or None, instance=agency)
    if request.method == 'POST' and form.is_valid():
        form.save()
        messages.success(request, f'Agency "{agency.name}" updated.')
        return redirect('dashboard:agency_list')
    return render(request, 'dashboard/agencies/form.html', {
        'form':   form,
        'title':  f'Edit agency — {agency.name}',
        'agency': agency,
        'page': 'agencies',
    })


@require_POST
@admin_role_required
def agency_delete(request, pk):
    agency = get_object_or_404(Agency, pk=pk)
    if agency.employees.exists():
        messages.error(request, f'Agency "{agency.name}" still has employees; reassign them first.')
        return redirect('dashboard:agency_list')
    agency.delete()
    messages.success(request, f'Agency "{agency.name}" closed.')
    return redirect('dashboard:agency_list')
