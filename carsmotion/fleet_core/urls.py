from django.urls import path

from . import views

app_name = "fleet_core"

urlpatterns = [
    path("reservations/", views.reservation_create_view, name="reservation-create"),
    path("reservations/<int:reservation_id>/", views.reservation_update_view,
         name="reservation-update"),
    path("reservations/<int:reservation_id>/status/", views.reservation_status_view,
         name="reservation-status"),
    path("reservations/<int:reservation_id>/invoice/", views.reservation_invoice_view,
         name="reservation-invoice"),
    path("invoices/<int:invoice_id>/pay/", views.invoice_pay_view, name="invoice-pay"),
    path("vehicles/<int:vehicle_id>/availability/", views.vehicle_availability_view,
         name="vehicle-availability"),
    path("vehicles/<int:vehicle_id>/quote/", views.vehicle_quote_view,
         name="vehicle-quote"),
    path("vehicles/reconcile/", views.reconcile_statuses_view, name="vehicle-reconcile"),
    path("maintenance/", views.maintenance_create_view, name="maintenance-create"),
    path("ledger/monthly-expenses/", views.monthly_expenses_view,
         name="monthly-expenses"),
    path("cash-book/<int:year>/<int:month>/", views.cash_book_view, name="cash-book"),
    path("dashboard/", views.dashboard_view, name="dashboard"),
    path("backup/", views.backup_export_view, name="backup-export"),
    path("backup/restore/", views.backup_restore_view, name="backup-restore"),
]
