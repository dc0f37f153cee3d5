"""Custom exceptions for Eloquence.

Errors carry actionable messages. Lifecycle misuse is surfaced explicitly,
while bad scores from upstream analyzers are clamped rather than raised.
"""

from __future__ import annotations


class EloquenceError(Exception):
    """Base exception for all Eloquence errors."""

    pass


class InvalidStateError(EloquenceError):
    """Operation not allowed in the current session state."""

    pass


class SessionAlreadyActiveError(InvalidStateError):
    """A session is already running for this user.

    Raised by start_session(). The running session has to be ended or
    reset first.
    """

    def __init__(self, session_id: str):
        self.session_id = session_id
        message = (
            f"Session '{session_id}' is still active.\n"
            "Call end_session() (or reset() to discard it) before starting a new one."
        )
        super().__init__(message)


class NoActiveSessionError(InvalidStateError):
    """end_session() was called while no session is running.

    A repeated end_session() raises this, so each session updates the
    rating exactly once.
    """

    def __init__(self, operation: str = "end_session"):
        self.operation = operation
        message = (
            f"Cannot {operation}: no session is active.\n"
            "Call start_session() first."
        )
        super().__init__(message)


class InvalidInputError(EloquenceError):
    """Input that cannot be coerced into a usable value.

    Out-of-range scores are clamped, not rejected. This is raised only for
    payloads of the wrong type altogether.
    """

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        full_message = message
        if field:
            full_message = f"Invalid value for '{field}': {message}"
        super().__init__(full_message)


class ConfigError(EloquenceError):
    """Error in configuration.

    Raised when configuration is invalid or missing required fields.
    """

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        full_message = message
        if field:
            full_message = f"Configuration error in '{field}': {message}"
        super().__init__(full_message)


class APIKeyError(EloquenceError):
    """Missing or invalid API key.

    Raised when an analyzer needs a provider key that is not available.
    """

    def __init__(self, provider: str, env_var: str):
        self.provider = provider
        self.env_var = env_var
        message = (
            f"{provider} API key not found.\n"
            f"Set the {env_var} environment variable or pass it to Config.\n"
            f"Example: export {env_var}=sk-..."
        )
        super().__init__(message)


class AnalysisError(EloquenceError):
    """An analyzer failed to produce feedback.

    Raised by speech or visual analyzers when the upstream service fails
    and no safe default applies (e.g. transcription of the audio failed).
    """

    def __init__(self, message: str, modality: str | None = None):
        self.modality = modality
        full_message = f"Analysis failed: {message}"
        if modality:
            full_message += f"\nModality: {modality}"
        super().__init__(full_message)
