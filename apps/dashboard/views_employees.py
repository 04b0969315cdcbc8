"""Employee management views (administrators only)."""
import logging
from django.contrib import messages
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from apps.accounts.decorators import admin_role_required
from apps.core.wizard import Step
from apps.core.wizard_views import run_form_wizard
from apps.staff.models import Employee, EmployeeRole
from .forms import (
    EmployeeForm, EmployeePersonalForm, EmployeeProfessionalForm, EmployeeSecurityForm,
)

logger = logging.getLogger(__name__)

EMPLOYEE_STEPS = [
    Step('personal', 'Personal information', 'Name and email',
         'dashboard/wizard_steps/form.html'),
    Step('professional', 'Position', 'Role, agency and hiring date',
         'dashboard/wizard_steps/form.html'),
    Step('security', 'Login', 'Password for the back-office account',
         'dashboard/wizard_steps/form.html'),
    Step('review', 'Review', 'Check before creating the account',
         'dashboard/wizard_steps/employee_review.html'),
]


@transaction.atomic
def create_employee(cleaned: dict) -> Employee:
    """
    Create the staff login and its Employee profile together.

    The wizard only ever holds the hashed password, so it is set directly.
    """
    user = get_user_model()(
        username=cleaned['email'],
        email=cleaned['email'],
        password=cleaned['password_hash'],
        first_name=cleaned['first_name'],
        last_name=cleaned['last_name'],
        is_staff=True,
    )
    user.save()
    return Employee.objects.create(
        user=user,
        first_name=cleaned['first_name'],
        last_name=cleaned['last_name'],
        email=cleaned['email'],
        role=cleaned['role'],
        agency=cleaned['agency'],
        hired_on=cleaned['hired_on'],
    )


@admin_role_required
def employee_list(request):
    employees = Employee.objects.select_related('agency').order_by('last_name', 'first_name')
    search = request.GET.get('q', '').strip()
    role = request.GET.get('role', '')
    if search:
        employees = employees.filter(
            Q(first_name__icontains=search) |
            Q(last_name__icontains=search) |
            Q(email__icontains=search)
        )
    if role in EmployeeRole.values:
        employees = employees.filter(role=role)
    return render(request, 'dashboard/employees/list.html', {
        'employees': employees,
        'roles':     EmployeeRole.choices,
        'filters':   request.GET,
        'page': 'employees',
    })


@admin_role_required
def employee_create(request):
    def create(cleaned):
        employee = create_employee(cleaned)
        logger.info('Employee account %s created by %s', employee.email, request.user.get_username())
        messages.success(request, f'Employee "{employee.full_name}" created.')
        return redirect('dashboard:employee_list')

    def summary(cleaned):
        # Never echo the password back on the review step
        return {
            'page': 'employees',
            'summary': {k: v for k, v in cleaned.items() if not k.startswith('password')},
        }

    return run_form_wizard(
        request,
        name='employee_create',
        title='New employee',
        description='Create a back-office account for a team member.',
        steps=EMPLOYEE_STEPS,
        form_classes={
            'personal': EmployeePersonalForm,
            'professional': EmployeeProfessionalForm,
            'security': EmployeeSecurityForm,
        },
        on_done=create,
        cancel_url=reverse('dashboard:employee_list'),
        error_message="An error occurred while creating the employee.",
        context_builder=summary,
    )


@admin_role_required
def employee_edit(request, pk):
    employee = get_object_or_404(Employee.objects.select_related('user'), pk=pk)
    form = EmployeeForm(request.POST or None, instance=employee)
    if request.method == 'POST' and form.is_valid():
        form.save()
        messages.success(request, f'Employee "{employee.full_name}" updated.')
        return redirect('dashboard:employee_list')
    return render(request, 'dashboard/employees/form.html', {
        'form':     form,
        'title':    f'Edit employee — {employee.full_name}',
        'employee': employee,
        'page': 'employees',
    })


@require_POST
@admin_role_required
def employee_delete(request, pk):
    employee = get_object_or_404(Employee.objects.select_related('user'), pk=pk)
    if employee.user_id == request.user.pk:
        messages.error(request, 'You cannot remove your own account.')
        return redirect('dashboard:employee_list')
    employee.delete()
    logger.info('Employee %s removed by %s', employee.email, request.user.get_username())
    messages.success(request, f'Employee "{employee.full_name}" removed; their login is disabled.')
    return redirect('dashboard:employee_list')
