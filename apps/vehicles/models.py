"""
Vehicle model: one row per physical car in the fleet.

`daily_rate` is the base price per rental day; option surcharges are added
on top by apps.reservations.pricing. `is_available` is the fleet manager's
switch (maintenance, sold, ...); date overlap with existing reservations is
checked separately by the reservation engine.
"""
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Avg

from apps.core.models import BaseModel
from apps.agencies.models import Agency


class VehicleCategory(models.TextChoices):
    ECONOMY = 'economy', 'Economy'
    COMPACT = 'compact', 'Compact'
    SEDAN   = 'sedan',   'Sedan'
    SUV     = 'suv',     'SUV'
    LUXURY  = 'luxury',  'Luxury'


class FuelType(models.TextChoices):
    PETROL   = 'petrol',   'Petrol'
    DIESEL   = 'diesel',   'Diesel'
    ELECTRIC = 'electric', 'Electric'
    HYBRID   = 'hybrid',   'Hybrid'


class Transmission(models.TextChoices):
    MANUAL    = 'manual',    'Manual'
    AUTOMATIC = 'automatic', 'Automatic'


EQUIPMENT_CHOICES = [
    'Air conditioning', 'GPS', 'Bluetooth', 'Radio', 'Reversing camera',
    'Cruise control', 'Heated seats', 'Sunroof', 'Leather seats',
    'Premium audio', 'Autopilot', 'Touchscreen', 'Supercharger access',
    'Parking assist', 'Blind spot detection', 'Emergency braking',
]


class Vehicle(BaseModel):
    agency = models.ForeignKey(
        Agency, on_delete=models.SET_NULL, null=True, blank=True, related_name='vehicles',
    )
    brand = models.CharField(max_length=80)
    model = models.CharField(max_length=80)
    category = models.CharField(max_length=10, choices=VehicleCategory.choices, db_index=True)
    daily_rate = models.DecimalField(
        max_digits=8, decimal_places=2, validators=[MinValueValidator(1)],
    )
    is_available = models.BooleanField(default=True, db_index=True)
    fuel = models.CharField(max_length=10, choices=FuelType.choices)
    transmission = models.CharField(max_length=10, choices=Transmission.choices)
    seats = models.PositiveSmallIntegerField(
        default=5, validators=[MinValueValidator(2), MaxValueValidator(9)],
    )
    image = models.ImageField(upload_to='vehicles/', blank=True, null=True)
    description = models.TextField(blank=True)
    equipment = models.JSONField(default=list, blank=True)
    mileage = models.PositiveIntegerField(default=0, help_text='Odometer reading in km')
    year = models.PositiveSmallIntegerField()

    class Meta:
        verbose_name = 'Vehicle'
        verbose_name_plural = 'Vehicles'
        ordering = ['brand', 'model']

    def __str__(self):
        return f"{self.brand} {self.model} ({self.year})"

    @property
    def display_name(self):
        return f"{self.brand} {self.model}"

    def average_rating(self):
        """Mean review rating rounded to one decimal, 0 when unrated."""
        avg = self.reviews.filter(is_published=True).aggregate(avg=Avg('rating'))['avg']
        return round(avg, 1) if avg is not None else 0
