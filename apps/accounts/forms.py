"""Client registration form."""
from django import forms
from django.contrib.auth import get_user_model, password_validation

from apps.clients.models import Client, normalize_phone

_ctrl = {'class': 'form-control'}


class RegistrationForm(forms.Form):
    first_name = forms.CharField(max_length=80, widget=forms.TextInput(attrs=_ctrl))
    last_name = forms.CharField(max_length=80, widget=forms.TextInput(attrs=_ctrl))
    email = forms.EmailField(widget=forms.EmailInput(attrs=_ctrl))
    phone = forms.CharField(
        max_length=20,
        widget=forms.TextInput(attrs={**_ctrl, 'placeholder': '06 12 34 56 78'}),
    )
    licence_number = forms.CharField(
        max_length=40, label='Driving licence number', widget=forms.TextInput(attrs=_ctrl),
    )
    password1 = forms.CharField(label='Password', widget=forms.PasswordInput(attrs=_ctrl))
    password2 = forms.CharField(label='Confirm password', widget=forms.PasswordInput(attrs=_ctrl))

    def clean_email(self):
        email = self.cleaned_data['email'].strip().lower()
        User = get_user_model()
        if User.objects.filter(username__iexact=email).exists() or \
                Client.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError('An account already exists with this email address.')
        return email

    def clean_phone(self):
        try:
            return normalize_phone(self.cleaned_data['phone'])
        except ValueError:
            raise forms.ValidationError('Enter a valid French phone number (10 digits).')

    def clean(self):
        cleaned = super().clean()
        p1, p2 = cleaned.get('password1'), cleaned.get('password2')
        if p1 and p2 and p1 != p2:
            self.add_error('password2', 'The passwords do not match.')
        elif p1:
            try:
                password_validation.validate_password(p1)
            except forms.ValidationError as exc:
                self.add_error('password1', exc)
        return cleaned

    def save(self) -> Client:
        data = self.cleaned_data
        user = get_user_model().objects.create_user(
            username=data['email'],
            email=data['email'],
            password=data['password1'],
            first_name=data['first_name'],
            last_name=data['last_name'],
        )
        return Client.objects.create(
            user=user,
            first_name=data['first_name'],
            last_name=data['last_name'],
            email=data['email'],
            phone=data['phone'],
            licence_number=data['licence_number'],
        )
