"""
Employee model: back-office staff attached to one agency.
Every employee has a staff login; role ADMIN additionally manages
agencies and other employees.
"""
from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.core.models import BaseModel
from apps.agencies.models import Agency


class EmployeeRole(models.TextChoices):
    ADMIN    = 'admin',    'Administrator'
    EMPLOYEE = 'employee', 'Employee'


class Employee(BaseModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='employee',
    )
    agency = models.ForeignKey(
        Agency, on_delete=models.PROTECT, related_name='employees',
    )
    first_name = models.CharField(max_length=80)
    last_name = models.CharField(max_length=80)
    email = models.EmailField(unique=True)
    role = models.CharField(
        max_length=10, choices=EmployeeRole.choices, default=EmployeeRole.EMPLOYEE, db_index=True,
    )
    hired_on = models.DateField(default=timezone.localdate)

    class Meta:
        verbose_name = 'Employee'
        verbose_name_plural = 'Employees'
        ordering = ['last_name', 'first_name']

    def __str__(self):
        return f"{self.full_name} — {self.agency.name}"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self):
        return self.role == EmployeeRole.ADMIN

    def delete(self, *args, **kwargs):
        """Archive the employee and revoke back-office access."""
        super().delete(*args, **kwargs)
        self.user.is_active = False
        self.user.is_staff = False
        self.user.save(update_fields=['is_active', 'is_staff'])
