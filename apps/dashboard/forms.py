"""Back-office forms:
 - wizard step forms for vehicle / agency / employee creation
 - ModelForms for editing
 - payment recording
"""
from django import forms
from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import identify_hasher, make_password
from django.utils import timezone

from apps.agencies.models import Agency
from apps.payments.models import Payment, PaymentMethod, PaymentStatus
from apps.reservations.models import Reservation, ReservationStatus
from apps.staff.models import Employee, EmployeeRole
from apps.vehicles.models import (
    EQUIPMENT_CHOICES, FuelType, Transmission, Vehicle, VehicleCategory,
)


_ctrl   = {'class': 'form-control'}
_select = {'class': 'form-select'}
_check  = {'class': 'form-check-input'}
_ta     = lambda r: {'class': 'form-control', 'rows': r}

EQUIPMENT_FIELD_CHOICES = [(item, item) for item in EQUIPMENT_CHOICES]


def _agency_field(required=True):
    return forms.ModelChoiceField(
        queryset=Agency.objects.order_by('name'),
        required=required,
        widget=forms.Select(attrs=_select),
        empty_label='— Select an agency —',
    )


# ─────────────────────────────────────────────────────────────────────────────
# Vehicle creation wizard: basic → specs → details → equipment → review
# ─────────────────────────────────────────────────────────────────────────────

class VehicleBasicForm(forms.Form):
    brand = forms.CharField(max_length=80, widget=forms.TextInput(attrs={**_ctrl, 'placeholder': 'e.g. Peugeot'}))
    model = forms.CharField(max_length=80, widget=forms.TextInput(attrs={**_ctrl, 'placeholder': 'e.g. 208'}))
    category = forms.ChoiceField(choices=VehicleCategory.choices, widget=forms.Select(attrs=_select))
    agency = _agency_field(required=False)


class VehicleSpecsForm(forms.Form):
    fuel = forms.ChoiceField(choices=FuelType.choices, widget=forms.Select(attrs=_select))
    transmission = forms.ChoiceField(choices=Transmission.choices, widget=forms.Select(attrs=_select))
    seats = forms.IntegerField(min_value=2, max_value=9, initial=5, widget=forms.NumberInput(attrs=_ctrl))
    daily_rate = forms.DecimalField(
        min_value=1, max_digits=8, decimal_places=2, label='Daily rate (€)',
        widget=forms.NumberInput(attrs={**_ctrl, 'step': '0.01'}),
    )


class VehicleDetailsForm(forms.Form):
    mileage = forms.IntegerField(min_value=0, label='Mileage (km)', widget=forms.NumberInput(attrs=_ctrl))
    year = forms.IntegerField(min_value=1990, widget=forms.NumberInput(attrs=_ctrl))
    description = forms.CharField(required=False, widget=forms.Textarea(attrs=_ta(3)))
    is_available = forms.BooleanField(required=False, initial=True, widget=forms.CheckboxInput(attrs=_check))

    def clean_year(self):
        year = self.cleaned_data['year']
        if year > timezone.localdate().year + 1:
            raise forms.ValidationError('The model year cannot be in the future.')
        return year


class VehicleEquipmentForm(forms.Form):
    equipment = forms.MultipleChoiceField(
        choices=EQUIPMENT_FIELD_CHOICES, required=False,
        widget=forms.CheckboxSelectMultiple(attrs={'class': 'checkbox-grid'}),
    )


class VehicleForm(forms.ModelForm):
    """Single-page edit form."""
    equipment = forms.MultipleChoiceField(
        choices=EQUIPMENT_FIELD_CHOICES, required=False,
        widget=forms.CheckboxSelectMultiple(attrs={'class': 'checkbox-grid'}),
    )

    class Meta:
        model = Vehicle
        fields = [
            'brand', 'model', 'category', 'agency', 'fuel', 'transmission', 'seats',
            'daily_rate', 'mileage', 'year', 'description', 'image', 'equipment', 'is_available',
        ]
        widgets = {
            'brand':        forms.TextInput(attrs=_ctrl),
            'model':        forms.TextInput(attrs=_ctrl),
            'category':     forms.Select(attrs=_select),
            'agency':       forms.Select(attrs=_select),
            'fuel':         forms.Select(attrs=_select),
            'transmission': forms.Select(attrs=_select),
            'seats':        forms.NumberInput(attrs=_ctrl),
            'daily_rate':   forms.NumberInput(attrs={**_ctrl, 'step': '0.01'}),
            'mileage':      forms.NumberInput(attrs=_ctrl),
            'year':         forms.NumberInput(attrs=_ctrl),
            'description':  forms.Textarea(attrs=_ta(3)),
            'is_available': forms.CheckboxInput(attrs=_check),
        }


# ─────────────────────────────────────────────────────────────────────────────
# Agency creation wizard: basic → contact → hours → review
# ─────────────────────────────────────────────────────────────────────────────

class AgencyBasicForm(forms.Form):
    name = forms.CharField(max_length=120, widget=forms.TextInput(attrs={**_ctrl, 'placeholder': 'AutoLoc Lille Centre'}))
    address = forms.CharField(widget=forms.Textarea(attrs={**_ta(2), 'placeholder': '12 rue Nationale, 59000 Lille'}))


class AgencyContactForm(forms.Form):
    phone = forms.CharField(max_length=20, widget=forms.TextInput(attrs={**_ctrl, 'placeholder': '03 20 00 00 00'}))
    email = forms.EmailField(widget=forms.EmailInput(attrs=_ctrl))


class AgencyHoursForm(forms.Form):
    opening_hours = forms.CharField(
        max_length=120, initial='8h-18h du lundi au samedi',
        widget=forms.TextInput(attrs=_ctrl),
    )


class AgencyForm(forms.ModelForm):
    class Meta:
        model = Agency
        fields = ['name', 'address', 'phone', 'email', 'opening_hours']
        widgets = {
            'name':          forms.TextInput(attrs=_ctrl),
            'address':       forms.Textarea(attrs=_ta(2)),
            'phone':         forms.TextInput(attrs=_ctrl),
            'email':         forms.EmailInput(attrs=_ctrl),
            'opening_hours': forms.TextInput(attrs=_ctrl),
        }


# ─────────────────────────────────────────────────────────────────────────────
# Employee creation wizard: personal → professional → security → review
# ─────────────────────────────────────────────────────────────────────────────

def _email_taken(email, exclude_employee=None) -> bool:
    users = get_user_model().objects.filter(username__iexact=email)
    employees = Employee.all_objects.filter(email__iexact=email)
    if exclude_employee is not None:
        users = users.exclude(pk=exclude_employee.user_id)
        employees = employees.exclude(pk=exclude_employee.pk)
    return users.exists() or employees.exists()


class EmployeePersonalForm(forms.Form):
    first_name = forms.CharField(max_length=80, widget=forms.TextInput(attrs=_ctrl))
    last_name = forms.CharField(max_length=80, widget=forms.TextInput(attrs=_ctrl))
    email = forms.EmailField(widget=forms.EmailInput(attrs=_ctrl))

    def clean_email(self):
        email = self.cleaned_data['email'].strip().lower()
        if _email_taken(email):
            raise forms.ValidationError('An account already exists with this email address.')
        return email


class EmployeeProfessionalForm(forms.Form):
    role = forms.ChoiceField(choices=EmployeeRole.choices, widget=forms.Select(attrs=_select))
    agency = _agency_field()
    hired_on = forms.DateField(
        initial=timezone.localdate,
        widget=forms.DateInput(attrs={**_ctrl, 'type': 'date'}, format='%Y-%m-%d'),
    )


class EmployeeSecurityForm(forms.Form):
    """
    Password step of the employee wizard.

    Only the hash is kept between wizard requests (see `session_values`).
    When re-validated from the session the form receives `password_hash`
    instead of the two password fields and accepts it as is.
    """
    password1 = forms.CharField(
        label='Password', min_length=6, required=False,
        widget=forms.PasswordInput(attrs=_ctrl),
    )
    password2 = forms.CharField(
        label='Confirm password', required=False,
        widget=forms.PasswordInput(attrs=_ctrl),
    )

    def _stored_hash(self):
        encoded = self.data.get('password_hash', '')
        if not encoded:
            return None
        try:
            identify_hasher(encoded)
        except ValueError:
            return None
        return encoded

    def clean(self):
        cleaned = super().clean()
        if self.has_error('password1'):
            return cleaned
        p1, p2 = cleaned.get('password1'), cleaned.get('password2')

        stored = self._stored_hash()
        if not p1 and not p2 and stored:
            cleaned['password_hash'] = stored
        elif not p1 or not p2:
            for name in ('password1', 'password2'):
                if not cleaned.get(name):
                    self.add_error(name, self.fields[name].error_messages['required'])
        elif p1 != p2:
            self.add_error('password2', 'The passwords do not match.')
        else:
            cleaned['password_hash'] = make_password(p1)
        return cleaned

    def session_values(self) -> dict:
        return {'password_hash': [self.cleaned_data['password_hash']]}


class EmployeeForm(forms.ModelForm):
    class Meta:
        model = Employee
        fields = ['first_name', 'last_name', 'email', 'role', 'agency', 'hired_on']
        widgets = {
            'first_name': forms.TextInput(attrs=_ctrl),
            'last_name':  forms.TextInput(attrs=_ctrl),
            'email':      forms.EmailInput(attrs=_ctrl),
            'role':       forms.Select(attrs=_select),
            'agency':     forms.Select(attrs=_select),
            'hired_on':   forms.DateInput(attrs={**_ctrl, 'type': 'date'}, format='%Y-%m-%d'),
        }

    def clean_email(self):
        email = self.cleaned_data['email'].strip().lower()
        if _email_taken(email, exclude_employee=self.instance):
            raise forms.ValidationError('An account already exists with this email address.')
        return email

    def save(self, commit=True):
        employee = super().save(commit=commit)
        if commit:
            user = employee.user
            user.username = user.email = employee.email
            user.first_name, user.last_name = employee.first_name, employee.last_name
            user.save()
        return employee


# ─────────────────────────────────────────────────────────────────────────────
# Payments
# ─────────────────────────────────────────────────────────────────────────────

class PaymentForm(forms.ModelForm):
    reservation = forms.ModelChoiceField(
        queryset=Reservation.objects.exclude(status=ReservationStatus.CANCELLED)
        .select_related('client', 'vehicle').order_by('-created_at'),
        widget=forms.Select(attrs=_select),
    )
    status = forms.ChoiceField(
        choices=[(PaymentStatus.PENDING, PaymentStatus.PENDING.label),
                 (PaymentStatus.PAID, PaymentStatus.PAID.label)],
        initial=PaymentStatus.PAID,
        widget=forms.Select(attrs=_select),
    )

    class Meta:
        model = Payment
        fields = ['reservation', 'amount', 'method', 'status']
        widgets = {
            'amount': forms.NumberInput(attrs={**_ctrl, 'step': '0.01'}),
            'method': forms.Select(attrs=_select),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['method'].initial = PaymentMethod.CARD
        # Blank amount defaults to the reservation total
        self.fields['amount'].required = False
        self.fields['reservation'].label_from_instance = (
            lambda r: f"{r.reference} — {r.client.full_name} — {r.total_price} €"
        )

    def clean(self):
        cleaned = super().clean()
        reservation, amount = cleaned.get('reservation'), cleaned.get('amount')
        if reservation is not None and amount is None:
            cleaned['amount'] = reservation.total_price
        return cleaned
