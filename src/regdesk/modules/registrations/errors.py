"""
Registration Errors

Exceptions raised by the validator and the workflow. Each carries the
message shown to the caller, a stable error code and the HTTP status the
routers answer with.
"""


class RegistrationServiceError(Exception):
    """Base exception for registration service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class RegistrationValidationError(RegistrationServiceError):
    """Raised when a submission is incomplete or its payment proof is unacceptable."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
        )


class RegistrationNotFoundError(RegistrationServiceError):
    """Raised when no registration has the requested id."""

    def __init__(self, registration_id: str | None = None):
        self.registration_id = registration_id
        super().__init__(
            message="Not found",
            error_code="NOT_FOUND",
            status_code=404,
        )


class PaymentProofMissingError(RegistrationServiceError):
    """Raised when a registration exists but its stored file does not."""

    def __init__(self, registration_id: str):
        self.registration_id = registration_id
        super().__init__(
            message="File missing",
            error_code="FILE_MISSING",
            status_code=404,
        )


class InvalidStatusError(RegistrationServiceError):
    """Raised when a transition targets a value outside the status set."""

    def __init__(self, requested_status: str | None):
        self.requested_status = requested_status
        super().__init__(
            message="Invalid status",
            error_code="INVALID_STATUS",
            status_code=400,
        )


class RegistrationSubmissionError(RegistrationServiceError):
    """Raised when a valid submission could not be persisted."""

    def __init__(self):
        super().__init__(
            message="Submission failed. Please try again.",
            error_code="SUBMISSION_FAILED",
            status_code=500,
        )
