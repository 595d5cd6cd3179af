from django.urls import path
from . import views

urlpatterns = [
    path("", views.home, name="home"),
    path("stats/", views.stats, name="stats"),
    path("slots/", views.view_slots, name="view_slots"),
    path("slots/add/", views.add_slot, name="add_slot"),
    path("slots/<str:slot_id>/release/", views.force_release, name="force_release"),
    path("checkin/", views.check_in, name="check_in"),
    path("checkout/<str:slot_id>/", views.check_out, name="check_out"),
    path("vehicles/", views.active_vehicles, name="active_vehicles"),
    path("ledger/", views.ledger, name="ledger"),
    path("ledger/export/", views.export_ledger, name="export_ledger"),
    path(
        "ledger/<str:transaction_id>/edit/",
        views.edit_transaction,
        name="edit_transaction",
    ),
    path(
        "ledger/<str:transaction_id>/delete/",
        views.delete_transaction,
        name="delete_transaction",
    ),
    path(
        "ledger/<str:transaction_id>/receipt/",
        views.download_receipt,
        name="download_receipt",
    ),
    path("reports/", views.reports, name="reports"),
    path("insights/", views.insights, name="insights"),
]
