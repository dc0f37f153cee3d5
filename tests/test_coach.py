"""Tests for the Coach class."""

import logging

import pytest

from eloquence import (
    AnalysisError,
    Coach,
    FeedbackGenerator,
    MockSpeechAnalyzer,
    MockVisualAnalyzer,
    NoActiveSessionError,
    RatingStore,
    SessionAlreadyActiveError,
)
from eloquence.analyzer import default_notes


class FailingSpeechAnalyzer(MockSpeechAnalyzer):
    """Speech analyzer whose transcription always fails."""

    async def transcribe(self, audio: bytes) -> str:
        self.calls += 1
        raise AnalysisError("service unavailable", modality="speech")


class EndingSpeechAnalyzer(MockSpeechAnalyzer):
    """Speech analyzer that ends the coach's session while it works."""

    def __init__(self, coach: Coach):
        super().__init__()
        self.coach = coach

    async def analyze_tone(self, transcript: str):
        self.coach.end()
        return await super().analyze_tone(transcript)


class ResettingVisualAnalyzer(MockVisualAnalyzer):
    """Visual analyzer that discards the coach's session while it works."""

    def __init__(self, coach: Coach):
        super().__init__(seed=3)
        self.coach = coach

    async def analyze(self, frame: bytes | None = None):
        self.coach.reset()
        return await super().analyze(frame)


@pytest.fixture
def coach() -> Coach:
    """Create a Coach that never calls an API."""
    return Coach(
        "alice",
        speech_analyzer=MockSpeechAnalyzer(tone_score=80),
        visual_analyzer=MockVisualAnalyzer(seed=11),
    )


class TestCoachInit:
    """Tests for Coach initialization."""

    def test_default_init(self) -> None:
        """Test Coach with defaults."""
        coach = Coach()
        assert coach.user_id == "default"
        assert coach.rating.current_rating == 1200
        assert not coach.aggregator.is_active

    def test_default_visual_analyzer(self) -> None:
        """Test the synthetic visual analyzer is used by default."""
        assert isinstance(Coach()._get_visual_analyzer(), MockVisualAnalyzer)

    def test_shared_store(self) -> None:
        """Test coaches can share one rating store."""
        store = RatingStore()
        alice = Coach("alice", store=store)
        bob = Coach("bob", store=store)
        assert alice.aggregator.store is bob.aggregator.store

    def test_from_config(self, tmp_path) -> None:
        """Test creating a Coach from YAML."""
        path = tmp_path / "eloquence.yaml"
        path.write_text("coach:\n  initial_rating: 1000\n  adaptive_k_factor: false\n")

        coach = Coach.from_config(path, user_id="alice")
        assert coach.user_id == "alice"
        assert coach.config.adaptive_k_factor is False
        assert coach.rating.current_rating == 1000


class TestCoachSession:
    """Tests for running sessions through the Coach."""

    @pytest.mark.asyncio
    async def test_transcript_session(self, coach: Coach) -> None:
        """A scored transcript drives the rating."""
        coach.start("s1")
        feedback = await coach.submit_transcript(
            "Good morning everyone. Today I want to talk about practice."
        )
        assert feedback.overall_score == 91

        outcome = coach.end()
        assert outcome.combined_score == 91
        assert outcome.new_rating == 1216
        assert coach.rating.current_rating == 1216

    @pytest.mark.asyncio
    async def test_audio_and_frames(self, coach: Coach) -> None:
        """Both modalities are recorded into the session."""
        coach.start()
        await coach.submit_audio(b"audio", duration=10.0)
        await coach.submit_frame(b"frame")
        await coach.submit_frame(b"frame")

        record = coach.aggregator.active_session
        assert len(record.speech_feedback) == 1
        assert len(record.visual_feedback) == 2

        outcome = coach.end()
        assert 0 <= outcome.combined_score <= 100
        assert outcome.avg_speech_score > 0
        assert outcome.avg_visual_score > 0
        assert coach.history()[0].combined_score == outcome.combined_score

    @pytest.mark.asyncio
    async def test_submit_without_session(self, coach: Coach) -> None:
        """Nothing is analyzed while no session runs."""
        assert await coach.submit_audio(b"audio") is None
        assert await coach.submit_frame() is None
        assert coach._speech_analyzer.calls == 0

    @pytest.mark.asyncio
    async def test_analysis_failure_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """A failed analysis is logged and the session continues."""
        coach = Coach("alice", speech_analyzer=FailingSpeechAnalyzer())
        coach.start()

        with caplog.at_level(logging.ERROR, logger="eloquence.coach"):
            assert await coach.submit_audio(b"audio") is None

        assert "service unavailable" in caplog.text
        assert coach.aggregator.active_session.speech_feedback == []
        assert coach.end().combined_score == 0

    def test_lifecycle_errors(self, coach: Coach) -> None:
        """Lifecycle misuse surfaces from the aggregator."""
        with pytest.raises(NoActiveSessionError):
            coach.end()

        coach.start("s1")
        with pytest.raises(SessionAlreadyActiveError):
            coach.start("s2")

    def test_reset(self, coach: Coach) -> None:
        """reset() discards the session."""
        coach.start("s1")
        coach.reset()
        assert coach.history() == []
        assert coach.rating.total_sessions == 0

    @pytest.mark.asyncio
    async def test_context_manager(self) -> None:
        """The async context manager closes analyzers."""
        async with Coach("alice", speech_analyzer=MockSpeechAnalyzer()) as coach:
            coach.start()
            await coach.submit_transcript("Hello everyone. Nice to meet you.")
            coach.end()
        assert coach.rating.total_sessions == 1

    @pytest.mark.asyncio
    async def test_notes_without_anthropic_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Missing Claude credentials fall back to rule-based notes."""
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        analyzer = MockSpeechAnalyzer()
        analyzer.feedback_generator = FeedbackGenerator()
        coach = Coach("alice", speech_analyzer=analyzer)
        coach.start()

        feedback = await coach.submit_transcript("Hello everyone. Nice to meet you.")

        assert feedback is not None
        assert feedback.notes == default_notes(feedback)
        assert len(coach.aggregator.active_session.speech_feedback) == 1

    @pytest.mark.asyncio
    async def test_session_ended_during_speech_analysis(self) -> None:
        """Feedback finished after the session ended is not returned."""
        coach = Coach("alice")
        coach._speech_analyzer = EndingSpeechAnalyzer(coach)
        coach.start("s1")

        assert await coach.submit_transcript("Hello everyone. Nice to meet you.") is None
        assert coach.history()[0].speech_feedback == []
        assert coach.aggregator.latest_speech_feedback is None

    @pytest.mark.asyncio
    async def test_session_reset_during_visual_analysis(self) -> None:
        """Frames analyzed after a reset are dropped."""
        coach = Coach("alice")
        coach._visual_analyzer = ResettingVisualAnalyzer(coach)
        coach.start("s1")

        assert await coach.submit_frame(b"frame") is None
        assert coach.history() == []
        assert coach.aggregator.latest_visual_feedback is None
