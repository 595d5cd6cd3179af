from django.contrib import admin
from .models import ActiveVisit, LedgerEntry, Slot


@admin.register(LedgerEntry)
class LedgerEntryModelAdmin(admin.ModelAdmin):
    search_fields = ("id", "plate_number", "driver_name")
    list_display = (
        "plate_number",
        "driver_name",
        "slot_number",
        "entry_time",
        "exit_time",
        "duration_minutes",
        "total_fee",
    )
    list_filter = ("slot_number", "exit_time")


@admin.register(ActiveVisit)
class ActiveVisitModelAdmin(admin.ModelAdmin):
    search_fields = ("plate_number", "driver_name", "driver_phone")
    list_display = ("plate_number", "driver_name", "driver_phone", "slot", "entry_time")


admin.site.register(Slot)
