from django import forms
from .models import Review

RATING_CHOICES = [(i, f'{i} ★') for i in range(5, 0, -1)]


class ReviewForm(forms.ModelForm):
    rating = forms.TypedChoiceField(
        choices=RATING_CHOICES, coerce=int,
        widget=forms.RadioSelect(attrs={'class': 'rating-radio'}),
    )

    class Meta:
        model = Review
        fields = ['rating', 'comment']
        widgets = {
            'comment': forms.Textarea(attrs={
                'class': 'form-control', 'rows': 4,
                'placeholder': 'How was the vehicle? Was pick-up easy?',
            }),
        }
