"""
Agency model: a physical rental counter where vehicles are picked up.
"""
from django.db import models
from apps.core.models import BaseModel


class Agency(BaseModel):
    name = models.CharField(max_length=120)
    address = models.TextField()
    phone = models.CharField(max_length=20)
    email = models.EmailField()
    opening_hours = models.CharField(
        max_length=120,
        default='8h-18h du lundi au samedi',
        help_text='Free text, e.g. "9h-19h du lundi au dimanche"',
    )

    class Meta:
        verbose_name = 'Agency'
        verbose_name_plural = 'Agencies'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def city(self):
        """Last comma-separated part of the address ("..., Lille" -> "Lille")."""
        return self.address.rsplit(',', 1)[-1].strip() if self.address else ''
