"""Tests for Eloquence exceptions."""

import pytest

from eloquence import (
    AnalysisError,
    APIKeyError,
    ConfigError,
    EloquenceError,
    InvalidInputError,
    InvalidStateError,
    NoActiveSessionError,
    SessionAlreadyActiveError,
)


class TestExceptions:
    """Tests for custom exceptions."""

    def test_base_exception(self) -> None:
        """Test that all exceptions inherit from EloquenceError."""
        exceptions = [
            InvalidStateError("test"),
            SessionAlreadyActiveError("s1"),
            NoActiveSessionError(),
            InvalidInputError("test"),
            ConfigError("test"),
            APIKeyError("OpenAI", "OPENAI_API_KEY"),
            AnalysisError("test"),
        ]
        for exc in exceptions:
            assert isinstance(exc, EloquenceError)

    def test_lifecycle_errors_are_state_errors(self) -> None:
        """Test that lifecycle misuse can be caught as InvalidStateError."""
        assert isinstance(SessionAlreadyActiveError("s1"), InvalidStateError)
        assert isinstance(NoActiveSessionError(), InvalidStateError)

    def test_session_already_active(self) -> None:
        """Test SessionAlreadyActiveError names the running session."""
        exc = SessionAlreadyActiveError("s1")
        assert exc.session_id == "s1"
        assert "'s1' is still active" in str(exc)
        assert "end_session()" in str(exc)

    def test_no_active_session(self) -> None:
        """Test NoActiveSessionError message."""
        exc = NoActiveSessionError()
        assert exc.operation == "end_session"
        assert "no session is active" in str(exc)
        assert "start_session()" in str(exc)

    def test_invalid_input_with_field(self) -> None:
        """Test InvalidInputError with field."""
        exc = InvalidInputError("expected SpeechFeedback or dict, got str", field="speech_feedback")
        assert exc.field == "speech_feedback"
        assert "'speech_feedback'" in str(exc)

    def test_config_error_with_field(self) -> None:
        """Test ConfigError with field."""
        exc = ConfigError("expected a mapping", field="coach")
        assert exc.field == "coach"
        assert "Configuration error in 'coach'" in str(exc)

    def test_config_error_without_field(self) -> None:
        """Test ConfigError without field."""
        exc = ConfigError("Invalid config")
        assert exc.field is None
        assert str(exc) == "Invalid config"

    def test_api_key_error(self) -> None:
        """Test APIKeyError message."""
        exc = APIKeyError("OpenAI", "OPENAI_API_KEY")
        assert exc.provider == "OpenAI"
        assert exc.env_var == "OPENAI_API_KEY"
        assert "OpenAI API key not found" in str(exc)
        assert "export OPENAI_API_KEY" in str(exc)

    def test_analysis_error(self) -> None:
        """Test AnalysisError with modality."""
        exc = AnalysisError("transcription failed", modality="speech")
        assert exc.modality == "speech"
        assert "Analysis failed: transcription failed" in str(exc)
        assert "Modality: speech" in str(exc)

    def test_catch_base(self) -> None:
        """Test catching the base class."""
        with pytest.raises(EloquenceError):
            raise NoActiveSessionError()
