"""
Booking flow URLs.

  /reservations/book/<vehicle>/         3-step wizard (dates, options, review)
  /reservations/<uuid>/confirmation/    confirmation page with QR reference
  /reservations/api/quote/<vehicle>/    JSON price quote for live totals
"""
from django.urls import path
from . import views

app_name = 'reservations'

urlpatterns = [
    path('book/<uuid:vehicle_id>/',        views.book,         name='book'),
    path('<uuid:pk>/confirmation/',        views.confirmation, name='confirmation'),
    path('api/quote/<uuid:vehicle_id>/',   views.api_quote,    name='api_quote'),
]
