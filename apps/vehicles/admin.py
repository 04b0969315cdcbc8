from django.contrib import admin
from .models import Vehicle


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ['brand', 'model', 'year', 'category', 'daily_rate', 'is_available', 'agency', 'archived_at']
    list_filter = ['category', 'fuel', 'transmission', 'is_available', 'agency']
    search_fields = ['brand', 'model']
    readonly_fields = ['id', 'created_at', 'updated_at', 'archived_at']

    def get_queryset(self, request):
        # Archived vehicles stay visible (and restorable) here
        return Vehicle.all_objects.select_related('agency')
