"""
Review model.
A client may leave exactly one review per COMPLETED reservation of their own;
the reservation is stored so the rule can be enforced at database level.
"""
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from apps.core.models import UUIDModel, TimestampedModel
from apps.clients.models import Client
from apps.vehicles.models import Vehicle
from apps.reservations.models import Reservation


class Review(UUIDModel, TimestampedModel):
    client = models.ForeignKey(Client, on_delete=models.CASCADE, related_name='reviews')
    vehicle = models.ForeignKey(Vehicle, on_delete=models.CASCADE, related_name='reviews')
    reservation = models.OneToOneField(
        Reservation, on_delete=models.CASCADE, related_name='review',
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(max_length=1000)
    is_published = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = 'Review'
        verbose_name_plural = 'Reviews'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.client.full_name} — {self.vehicle.display_name} — {self.rating}★"

    @property
    def stars(self):
        return '★' * self.rating + '☆' * (5 - self.rating)
