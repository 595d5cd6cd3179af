from django import forms
import re
import logging

# Get the logger instance
logger = logging.getLogger(__name__)


class CheckInForm(forms.Form):
    plate_number = forms.CharField(label="Plate Number", max_length=15)
    driver_name = forms.CharField(label="Driver Name", max_length=100)
    driver_phone = forms.CharField(label="Phone Number", max_length=15)
    slot_id = forms.CharField(label="Slot", max_length=64, required=False)

    def clean_plate_number(self):
        val = self.cleaned_data.get("plate_number").strip().upper()
        # Regular expression for a standard vehicle plate
        if not re.match(r"^[A-Z0-9- ]{3,15}$", val):
            # LOG: Audit trail for invalid input
            logger.warning(f"Form Validation Error: Invalid plate number: '{val}'")
            raise forms.ValidationError(
                "Invalid format. Use 3-15 alphanumeric characters, spaces, or hyphens."
            )
        return val

    def clean_driver_phone(self):
        val = self.cleaned_data.get("driver_phone").strip()
        if not re.match(r"^\+?\d{9,15}$", val):
            logger.warning(f"Form Validation Error: Invalid phone number: '{val}'")
            raise forms.ValidationError(
                "Enter a valid phone number. It must be 9-15 digits and can start with '+'."
            )
        return val

    def clean_slot_id(self):
        return self.cleaned_data.get("slot_id", "").strip() or None


class AddSlotForm(forms.Form):
    label = forms.CharField(label="Slot Number", max_length=20)

    def clean_label(self):
        return self.cleaned_data.get("label").strip().upper()


class TransactionEditForm(forms.Form):
    """Administrative correction; only submitted fields are changed."""

    plate_number = forms.CharField(max_length=15, required=False)
    driver_name = forms.CharField(max_length=100, required=False)
    entry_time = forms.DateTimeField(required=False)
    exit_time = forms.DateTimeField(required=False)
    duration_minutes = forms.IntegerField(min_value=0, required=False)
    total_fee = forms.IntegerField(min_value=0, required=False)
    slot_number = forms.CharField(max_length=20, required=False)

    def clean_plate_number(self):
        return self.cleaned_data.get("plate_number", "").strip().upper()

    def patch(self):
        return {
            name: value
            for name, value in self.cleaned_data.items()
            if name in self.data and value not in (None, "")
        }
