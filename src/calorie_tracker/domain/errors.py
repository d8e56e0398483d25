"""Domain errors surfaced to the user."""


class RecognitionError(Exception):
    """Food recognition failed. The message is safe to show to the user."""

    def __init__(
        self, message: str, *, reason: str = "failed", status_code: int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.status_code = status_code


class ProfileMissingError(Exception):
    """No profile is stored; the user has to complete onboarding."""
