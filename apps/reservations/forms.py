"""Booking wizard step forms."""
from django import forms
from django.utils import timezone

from . import engine
from .pricing import OPTION_DAILY_PRICES, OPTION_LABELS

_date = {'class': 'form-control', 'type': 'date'}
_check = {'class': 'form-check-input'}


class RentalDatesForm(forms.Form):
    start_date = forms.DateField(label='Pick-up date', widget=forms.DateInput(attrs=_date))
    end_date = forms.DateField(label='Return date', widget=forms.DateInput(attrs=_date))

    def __init__(self, *args, vehicle=None, **kwargs):
        self.vehicle = vehicle
        super().__init__(*args, **kwargs)
        today = timezone.localdate().isoformat()
        self.fields['start_date'].widget.attrs['min'] = today
        self.fields['end_date'].widget.attrs['min'] = today

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get('start_date'), cleaned.get('end_date')
        if start is None or end is None or end <= start:
            return cleaned
        # Past and inverted ranges are refused by the engine at submission
        if self.vehicle is not None and not engine.is_vehicle_free(self.vehicle, start, end):
            raise forms.ValidationError(
                'This vehicle is already reserved for part of these dates.'
            )
        return cleaned


class RentalOptionsForm(forms.Form):
    gps = forms.BooleanField(required=False)
    full_insurance = forms.BooleanField(required=False)
    child_seat = forms.BooleanField(required=False)
    extra_driver = forms.BooleanField(required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for key, price in OPTION_DAILY_PRICES.items():
            field = self.fields[key]
            field.label = f'{OPTION_LABELS[key]} (+{price} €/day)'
            field.widget.attrs.update(_check)


class StatusChangeForm(forms.Form):
    """Back-office status select; choices limited to the legal next statuses."""
    status = forms.ChoiceField(widget=forms.Select(attrs={'class': 'form-select'}))
    reason = forms.CharField(
        required=False, max_length=500,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Reason (optional)'}),
    )

    def __init__(self, *args, reservation=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['status'].choices = reservation.next_statuses if reservation else []
