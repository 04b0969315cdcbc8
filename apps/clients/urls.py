from django.urls import path
from . import views

app_name = 'clients'

urlpatterns = [
    path('',                                   views.dashboard,          name='dashboard'),
    path('reservations/',                      views.reservation_list,   name='reservations'),
    path('reservations/<uuid:pk>/',            views.reservation_detail, name='reservation_detail'),
    path('reservations/<uuid:pk>/review/',     views.review_create,      name='review_create'),
    path('invoices/',                          views.invoice_list,       name='invoices'),
    path('invoices/<uuid:pk>/pdf/',            views.invoice_pdf,        name='invoice_pdf'),
    path('profile/',                           views.profile,            name='profile'),
]
