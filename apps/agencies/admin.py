from django.contrib import admin
from .models import Agency


@admin.register(Agency)
class AgencyAdmin(admin.ModelAdmin):
    list_display = ['name', 'city', 'phone', 'email', 'opening_hours', 'archived_at']
    search_fields = ['name', 'address', 'email']
    readonly_fields = ['id', 'created_at', 'updated_at', 'archived_at']

    def get_queryset(self, request):
        return Agency.all_objects.all()
