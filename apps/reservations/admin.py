from django.contrib import admin
from .models import Reservation, ReservationStatusLog


class ReservationStatusLogInline(admin.TabularInline):
    model = ReservationStatusLog
    extra = 0
    readonly_fields = ['from_status', 'to_status', 'changed_by', 'reason', 'changed_at']
    can_delete = False


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = [
        'reference', 'client', 'vehicle', 'start_date', 'end_date', 'status', 'total_price', 'created_at'
    ]
    list_filter = ['status', 'start_date', 'vehicle__category']
    search_fields = ['reference', 'client__last_name', 'client__email', 'vehicle__brand', 'vehicle__model']
    # status goes through the state machine (dashboard), never a raw edit
    readonly_fields = ['id', 'reference', 'status', 'created_at', 'updated_at']
    raw_id_fields = ['client', 'vehicle']
    date_hierarchy = 'start_date'
    inlines = [ReservationStatusLogInline]
    fieldsets = (
        ('Reservation', {'fields': ('id', 'reference', 'client', 'vehicle')}),
        ('Dates', {'fields': ('start_date', 'end_date')}),
        ('Options', {'fields': ('gps', 'full_insurance', 'child_seat', 'extra_driver')}),
        ('Status', {'fields': ('status', 'total_price')}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )


@admin.register(ReservationStatusLog)
class ReservationStatusLogAdmin(admin.ModelAdmin):
    list_display = ['reservation', 'from_status', 'to_status', 'changed_by', 'changed_at']
    readonly_fields = ['id', 'reservation', 'from_status', 'to_status', 'changed_by', 'reason', 'changed_at']
    search_fields = ['reservation__reference']
