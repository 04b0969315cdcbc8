from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = [
        'short_id', 'reservation', 'amount', 'method', 'status', 'paid_on', 'created_at'
    ]
    list_filter = ['status', 'method']
    search_fields = ['reservation__reference', 'reservation__client__last_name', 'reservation__client__email']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['reservation']
    fieldsets = (
        ('Payment', {'fields': ('id', 'reservation', 'amount', 'method', 'status', 'paid_on', 'recorded_by')}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    def short_id(self, obj):
        return obj.id_short
    short_id.short_description = 'ID'
