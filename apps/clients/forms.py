from django import forms
from .models import Client, normalize_phone

_ctrl = {'class': 'form-control'}


class ProfileForm(forms.ModelForm):
    class Meta:
        model = Client
        fields = ['first_name', 'last_name', 'phone', 'birth_date', 'licence_number', 'address']
        widgets = {
            'first_name':     forms.TextInput(attrs=_ctrl),
            'last_name':      forms.TextInput(attrs=_ctrl),
            'phone':          forms.TextInput(attrs={**_ctrl, 'placeholder': '06 12 34 56 78'}),
            'birth_date':     forms.DateInput(attrs={**_ctrl, 'type': 'date'}, format='%Y-%m-%d'),
            'licence_number': forms.TextInput(attrs=_ctrl),
            'address':        forms.TextInput(attrs=_ctrl),
        }

    def clean_phone(self):
        try:
            return normalize_phone(self.cleaned_data['phone'])
        except ValueError:
            raise forms.ValidationError('Enter a valid French phone number (10 digits).')

    def save(self, commit=True):
        client = super().save(commit=commit)
        if commit:
            user = client.user
            user.first_name, user.last_name = client.first_name, client.last_name
            user.save(update_fields=['first_name', 'last_name'])
        return client
