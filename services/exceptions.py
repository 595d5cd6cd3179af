class ParkingError(Exception):
    """Base class for recoverable engine errors returned to the caller."""

    status_code = 400
    default_message = "Parking operation failed."

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class NoCapacity(ParkingError):
    status_code = 409
    default_message = "Facility at maximum capacity."


class SlotUnavailable(ParkingError):
    status_code = 409
    default_message = "Slot is not available."


class SlotNotOccupied(ParkingError):
    status_code = 409
    default_message = "Slot is not occupied."


class InvalidTransaction(ParkingError):
    status_code = 400
    default_message = "Transaction is invalid."


class InvalidDuration(ParkingError):
    status_code = 400
    default_message = "Exit time precedes entry time."


class NotFound(ParkingError):
    status_code = 404
    default_message = "Record not found."


class PersistenceError(ParkingError):
    status_code = 503
    default_message = "Facility state could not be saved or loaded."
