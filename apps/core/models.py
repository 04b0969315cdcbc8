"""
Model mixins for the rental domain.

Past reservations and payments keep pointing at the agency, vehicle and
employee they were made with, so those rows are archived rather than removed:
`archived_at` is stamped and the row disappears from `objects`. `all_objects`
still returns it for the admin, reports and row locking in the booking engine.
"""
import uuid

from django.db import models
from django.utils import timezone


class UUIDModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True

    @property
    def id_short(self):
        """Upper-case first 8 hex digits, shown on payments and in log lines."""
        return self.id.hex[:8].upper()


class TimestampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    @property
    def created_on(self):
        """Creation date in the agency time zone (invoices, year filters)."""
        return timezone.localdate(self.created_at)


class ArchiveQuerySet(models.QuerySet):

    def live(self):
        return self.filter(archived_at__isnull=True)

    def archived(self):
        return self.filter(archived_at__isnull=False)

    def archive(self) -> int:
        """Archive the live rows of this queryset; returns how many were stamped."""
        return self.live().update(archived_at=timezone.now())

    def restore(self) -> int:
        return self.archived().update(archived_at=None)

    def delete(self):
        # Bulk deletes from the admin or the back-office archive too
        return self.archive()

    def purge(self):
        """Really delete the rows. Fails while reservations still protect them."""
        return super().delete()


class LiveManager(models.Manager.from_queryset(ArchiveQuerySet)):
    def get_queryset(self):
        return super().get_queryset().live()


class ArchivableModel(models.Model):
    archived_at = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = LiveManager()
    all_objects = ArchiveQuerySet.as_manager()

    class Meta:
        abstract = True

    def archive(self):
        if self.archived_at is None:
            self.archived_at = timezone.now()
            self.save(update_fields=['archived_at'])

    def delete(self, *args, **kwargs):
        self.archive()

    def purge(self, *args, **kwargs):
        return super().delete(*args, **kwargs)

    def restore(self):
        self.archived_at = None
        self.save(update_fields=['archived_at'])

    @property
    def is_archived(self):
        return self.archived_at is not None


class BaseModel(UUIDModel, TimestampedModel, ArchivableModel):
    """Agencies, vehicles and employees: UUID key, timestamps, archived on delete."""

    class Meta:
        abstract = True
