from django.urls import path
from . import views, views_agencies, views_employees, views_payments, views_reports, views_vehicles

app_name = 'dashboard'

urlpatterns = [
    # ── Core ──────────────────────────────────────────────────────────────
    path('',                                    views.overview,           name='overview'),
    path('revenue-data/',                       views.revenue_data,       name='revenue_data'),

    # ── Reservations ──────────────────────────────────────────────────────
    path('reservations/',                       views.reservation_list,   name='reservation_list'),
    path('reservations/<uuid:pk>/',             views.reservation_detail, name='reservation_detail'),
    path('reservations/<uuid:pk>/status/',      views.reservation_status, name='reservation_status'),

    # ── Clients ───────────────────────────────────────────────────────────
    path('clients/',                            views.client_list,        name='client_list'),
    path('clients/<uuid:pk>/',                  views.client_detail,      name='client_detail'),

    # ── Vehicles ──────────────────────────────────────────────────────────
    path('vehicles/',                           views_vehicles.vehicle_list,   name='vehicle_list'),
    path('vehicles/new/',                       views_vehicles.vehicle_create, name='vehicle_create'),
    path('vehicles/<uuid:pk>/edit/',            views_vehicles.vehicle_edit,   name='vehicle_edit'),
    path('vehicles/<uuid:pk>/toggle/',          views_vehicles.vehicle_toggle, name='vehicle_toggle'),
    path('vehicles/<uuid:pk>/delete/',          views_vehicles.vehicle_delete, name='vehicle_delete'),

    # ── Agencies ──────────────────────────────────────────────────────────
    path('agencies/',                           views_agencies.agency_list,   name='agency_list'),
    path('agencies/new/',                       views_agencies.agency_create, name='agency_create'),
    path('agencies/<uuid:pk>/edit/',            views_agencies.agency_edit,   name='agency_edit'),
    path('agencies/<uuid:pk>/delete/',          views_agencies.agency_delete, name='agency_delete'),

    # ── Employees ─────────────────────────────────────────────────────────
    path('employees/',                          views_employees.employee_list,   name='employee_list'),
    path('employees/new/',                      views_employees.employee_create, name='employee_create'),
    path('employees/<uuid:pk>/edit/',           views_employees.employee_edit,   name='employee_edit'),
    path('employees/<uuid:pk>/delete/',         views_employees.employee_delete, name='employee_delete'),

    # ── Payments ──────────────────────────────────────────────────────────
    path('payments/',                           views_payments.payment_list,      name='payment_list'),
    path('payments/new/',                       views_payments.payment_create,    name='payment_create'),
    path('payments/<uuid:pk>/paid/',            views_payments.payment_mark_paid, name='payment_mark_paid'),
    path('payments/<uuid:pk>/refund/',          views_payments.payment_refund,    name='payment_refund'),

    # ── Reports ───────────────────────────────────────────────────────────
    path('reports/',                            views_reports.report,     name='report'),
    path('reports/pdf/',                        views_reports.report_pdf, name='report_pdf'),
    path('reports/csv/',                        views_reports.report_csv, name='report_csv'),
]
