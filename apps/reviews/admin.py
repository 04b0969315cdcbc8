from django.contrib import admin
from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('client', 'vehicle', 'rating', 'is_published', 'created_at')
    list_filter = ('is_published', 'rating')
    search_fields = ('client__last_name', 'client__email', 'vehicle__brand', 'vehicle__model', 'comment')
    list_editable = ('is_published',)
    raw_id_fields = ('client', 'vehicle', 'reservation')
    ordering = ('-created_at',)
