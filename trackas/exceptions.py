class TrackasError(Exception):
    """Base exception for attendance rule violations and store failures."""


class ValidationError(TrackasError):
    """Raised when caller input is invalid; nothing has touched the store."""


class MissingStudentIdentifier(ValidationError):
    def __init__(self):
        super().__init__("Matriculation number is required.")


class InvalidThreshold(ValidationError):
    pass


class AdmissionUndetermined(ValidationError):
    """Venue point or device position is not resolved yet."""

    def __init__(self):
        super().__init__("Location not yet determined. Try again once your position is available.")


class DuplicateRegistration(TrackasError):
    def __init__(self, class_id: str, student_id: str):
        self.class_id = class_id
        self.student_id = student_id
        super().__init__(f"Attendance already registered for {student_id} in this class.")


class StoreError(TrackasError):
    """Backend failure; carries the underlying message."""


class LookupFailure(StoreError):
    pass


class LedgerTimeout(StoreError):
    pass
