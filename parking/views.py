import io
import logging

from django.http import HttpResponse, JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from config import FACILITY_INFO, RECENT_TRANSACTIONS
from services.export import export_filename, write_ledger_csv
from services.insights import InsightsClient, get_parking_insights
from services.pdf_generator import generate_receipt_pdf
from services.persistence import occupant_to_record, transaction_to_record

from .facility import get_facility
from .forms import AddSlotForm, CheckInForm, TransactionEditForm

logger = logging.getLogger(__name__)

# =============================================
# Home & Stats
# =============================================


@require_GET
@ensure_csrf_cookie
def home(request):
    facility = get_facility()
    return JsonResponse(
        {"facility": FACILITY_INFO, "stats": facility.stats().as_dict()}
    )


@require_GET
def stats(request):
    return JsonResponse(get_facility().stats().as_dict())


# =============================================
# Slot Viewing
# =============================================


@require_GET
@ensure_csrf_cookie
def view_slots(request):
    """Live board: every slot with the running fee of its occupant."""
    board = get_facility().live_board()
    return JsonResponse({"slots": [_board_row_json(row) for row in board]})


@require_GET
def active_vehicles(request):
    query = request.GET.get("q", "")
    facility = get_facility()
    slots = facility.search_active(query)
    now = facility.clock.now()
    return JsonResponse(
        {
            "count": len(slots),
            "vehicles": [
                dict(
                    occupant_to_record(slot.occupant),
                    slot_number=slot.number,
                    fee=facility.billing.fee(slot.occupant.entry_time, now),
                )
                for slot in slots
            ],
        }
    )


# =============================================
# Arrival & Departure
# =============================================


@require_POST
def check_in(request):
    form = CheckInForm(request.POST)
    if not form.is_valid():
        return JsonResponse({"errors": form.errors.get_json_data()}, status=400)

    occupant = get_facility().check_in(
        form.cleaned_data["plate_number"],
        form.cleaned_data["driver_name"],
        form.cleaned_data["driver_phone"],
        requested_slot=form.cleaned_data["slot_id"],
    )
    return JsonResponse(occupant_to_record(occupant), status=201)


@require_POST
def check_out(request, slot_id):
    transaction = get_facility().check_out(slot_id)
    return JsonResponse(transaction_to_record(transaction))


# =============================================
# Administration
# =============================================


@require_POST
def add_slot(request):
    form = AddSlotForm(request.POST)
    if not form.is_valid():
        return JsonResponse({"errors": form.errors.get_json_data()}, status=400)
    slot = get_facility().add_slot(form.cleaned_data["label"])
    return JsonResponse({"id": slot.id, "number": slot.number}, status=201)


@require_POST
def force_release(request, slot_id):
    if request.POST.get("confirm") != "yes":
        return JsonResponse(
            {"error": "ConfirmationRequired", "message": "Force purge not confirmed."},
            status=400,
        )
    occupant = get_facility().forced_release(slot_id, confirm=True)
    return JsonResponse({"discarded": occupant_to_record(occupant)})


# =============================================
# Ledger & Reports
# =============================================


@require_GET
def ledger(request):
    transactions = get_facility().ledger.search(request.GET.get("q", ""))
    return JsonResponse(
        {
            "count": len(transactions),
            "transactions": [transaction_to_record(t) for t in transactions],
        }
    )


@require_POST
def edit_transaction(request, transaction_id):
    form = TransactionEditForm(request.POST)
    if not form.is_valid():
        return JsonResponse({"errors": form.errors.get_json_data()}, status=400)
    transaction = get_facility().edit_transaction(transaction_id, **form.patch())
    return JsonResponse(transaction_to_record(transaction))


@require_POST
def delete_transaction(request, transaction_id):
    transaction = get_facility().delete_transaction(transaction_id)
    return JsonResponse({"deleted": transaction.id})


@require_GET
def reports(request):
    try:
        days = max(int(request.GET.get("days", 7)), 1)
    except (ValueError, TypeError):
        days = 7

    facility = get_facility()
    tz = timezone.get_current_timezone()
    revenue = facility.ledger.revenue_last_days(timezone.localdate(), days, tz=tz)
    hourly = facility.ledger.entries_by_hour_of_day(tz=tz)
    return JsonResponse(
        {
            "revenue_by_day": [
                {"date": day.isoformat(), "amount": amount}
                for day, amount in revenue.items()
            ],
            "entries_by_hour": [
                {"hour": f"{hour}:00", "checkins": count}
                for hour, count in hourly.items()
            ],
            "duration_distribution": facility.ledger.duration_histogram(),
            "active_duration_distribution": facility.active_duration_histogram(),
        }
    )


@require_GET
def export_ledger(request):
    buffer = io.StringIO()
    write_ledger_csv(get_facility().ledger.transactions, buffer)
    response = HttpResponse(buffer.getvalue(), content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = (
        f'attachment; filename="{export_filename(timezone.localdate())}"'
    )
    return response


@require_GET
def download_receipt(request, transaction_id):
    """Receipt PDF for a settled visit."""
    transaction = get_facility().ledger.get(transaction_id)
    pdf_buffer = generate_receipt_pdf(transaction, FACILITY_INFO)

    response = HttpResponse(pdf_buffer.getvalue(), content_type="application/pdf")
    response["Content-Disposition"] = (
        f'attachment; filename="SmartPark_Receipt_{transaction.id[:8].upper()}.pdf"'
    )
    return response


@require_GET
def insights(request):
    text = get_parking_insights(
        get_facility(),
        InsightsClient.from_config(),
        FACILITY_INFO["name"],
        recent=RECENT_TRANSACTIONS,
    )
    return JsonResponse({"insight": text})


# =============================================
# Helper Functions
# =============================================


def _board_row_json(row):
    slot = row["slot"]
    data = {"id": slot.id, "number": slot.number, "status": slot.status.value}
    if row["occupant"] is not None:
        data["occupant"] = occupant_to_record(row["occupant"])
        data["fee"] = row["fee"]
        data["duration"] = str(row["duration"])
    return data


# =============================================
# Error Handlers
# =============================================


def custom_404(request, exception=None):
    return JsonResponse(
        {"error": "NotFound", "message": "The requested page does not exist."},
        status=404,
    )


def custom_500(request):
    logger.error(
        f"500 Server Error: {request.path}",
        exc_info=True,
        extra={"status_code": 500, "request": request},
    )
    return JsonResponse(
        {
            "error": "ServerError",
            "message": "Something went wrong. Please try again later.",
        },
        status=500,
    )
