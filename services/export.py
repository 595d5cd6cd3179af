import csv

EXPORT_HEADERS = (
    "Plate Number",
    "Driver Name",
    "Entry Time",
    "Exit Time",
    "Duration (min)",
    "Total Fee (RWF)",
    "Slot Number",
)


def _format_time(value):
    return value.isoformat(sep=" ", timespec="seconds")


def ledger_rows(transactions):
    """One row per transaction, in the order given."""
    return [
        (
            t.plate_number,
            t.driver_name,
            _format_time(t.entry_time),
            _format_time(t.exit_time),
            t.duration_minutes,
            t.total_fee,
            t.slot_number,
        )
        for t in transactions
    ]


def write_ledger_csv(transactions, stream):
    writer = csv.writer(stream, quoting=csv.QUOTE_NONNUMERIC)
    writer.writerow(EXPORT_HEADERS)
    writer.writerows(ledger_rows(transactions))


def export_filename(day):
    return f"SmartPark_Ledger_{day.isoformat()}.csv"
