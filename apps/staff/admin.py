from django.contrib import admin
from .models import Employee


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ['last_name', 'first_name', 'email', 'role', 'agency', 'hired_on', 'archived_at']
    list_filter = ['role', 'agency']
    search_fields = ['last_name', 'first_name', 'email']
    readonly_fields = ['id', 'created_at', 'updated_at', 'archived_at']
    raw_id_fields = ['user']

    def get_queryset(self, request):
        return Employee.all_objects.select_related('agency')
