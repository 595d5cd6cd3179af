import qrcode
from io import BytesIO

from config import QR_BOX_SIZE, QR_BORDER


def generate_qr_png(data, box_size=QR_BOX_SIZE, border=QR_BORDER):
    qr = qrcode.QRCode(version=1, box_size=box_size, border=border)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    img.save(buffer, format="PNG")
    buffer.seek(0)
    return buffer


def receipt_reference(transaction):
    return f"SMARTPARK:{transaction.id}"
