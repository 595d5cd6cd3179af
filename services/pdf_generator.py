from reportlab.pdfgen import canvas
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from io import BytesIO

from services.qr_generator import generate_qr_png, receipt_reference


def generate_receipt_pdf(transaction, facility):
    qr_buffer = generate_qr_png(receipt_reference(transaction))

    pdf_buffer = BytesIO()
    p = canvas.Canvas(pdf_buffer, pagesize=A4)
    width, height = A4

    # Header
    p.setFont("Helvetica-Bold", 28)
    p.drawCentredString(width / 2, height - 80, facility["name"].upper())
    p.setFont("Helvetica", 14)
    p.drawCentredString(
        width / 2,
        height - 110,
        f"{facility['district']}, {facility['province']}, {facility['country']}",
    )
    p.setFont("Helvetica", 18)
    p.drawCentredString(width / 2, height - 145, "Parking Payment Receipt")

    # QR Code
    p.drawImage(
        ImageReader(qr_buffer),
        width / 2 - 100,
        height - 370,
        width=200,
        height=200,
        preserveAspectRatio=True,
    )

    p.setFont("Helvetica-Bold", 24)
    p.drawCentredString(width / 2, height - 410, f"{transaction.total_fee:,} RWF")

    y = height - 470
    p.setFont("Helvetica-Bold", 14)
    paid_at = transaction.payment_date or transaction.exit_time
    details = [
        ("Receipt No", transaction.id[:8].upper()),
        ("Plate Number", transaction.plate_number),
        ("Driver", transaction.driver_name),
        ("Slot", transaction.slot_number),
        ("Entry Time", transaction.entry_time.strftime("%d %B %Y, %I:%M %p")),
        ("Exit Time", transaction.exit_time.strftime("%d %B %Y, %I:%M %p")),
        ("Duration", f"{transaction.duration_minutes} min"),
        ("Paid", paid_at.strftime("%d %B %Y, %I:%M %p")),
    ]
    for label, value in details:
        p.drawString(100, y, f"{label}:")
        p.setFont("Helvetica", 14)
        p.drawString(280, y, value)
        p.setFont("Helvetica-Bold", 14)
        y -= 32

    # Footer
    p.setFont("Helvetica-Oblique", 11)
    p.drawCentredString(
        width / 2,
        80,
        f"Thank you for parking with {facility['name']} - {facility['contact']}",
    )

    p.showPage()
    p.save()
    pdf_buffer.seek(0)
    return pdf_buffer
