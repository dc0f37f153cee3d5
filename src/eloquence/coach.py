"""Main Coach class for Eloquence.

This module provides the primary entry point for the Eloquence SDK.
The Coach wires the speech and visual analyzers into a SessionAggregator,
so a caller only deals with raw audio, transcripts and frames.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

from .analyzer import BaseSpeechAnalyzer, BaseVisualAnalyzer, MockVisualAnalyzer, SpeechAnalyzer
from .config import Config
from .exceptions import AnalysisError
from .models import SessionOutcome, SessionRecord, SpeechFeedback, UserRating, VisualFeedback
from .scorer import RatingStore
from .session import SessionAggregator

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Coach:
    """Main entry point for Eloquence.

    Runs practice sessions for one user: analyzers turn what the user says
    and does into feedback, and the aggregator turns the feedback into a
    session score and an Elo rating.

    Example:
        ```python
        from eloquence import Coach

        async with Coach("alice") as coach:
            coach.start()
            await coach.submit_audio(chunk, duration=10.0)
            await coach.submit_frame(jpeg_bytes)
            outcome = coach.end()
            print(outcome.combined_score, outcome.new_rating)
        ```
    """

    def __init__(
        self,
        user_id: str = "default",
        config: Config | None = None,
        store: RatingStore | None = None,
        speech_analyzer: BaseSpeechAnalyzer | None = None,
        visual_analyzer: BaseVisualAnalyzer | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the Coach.

        Args:
            user_id: The user practicing.
            config: Optional configuration. Uses defaults if not provided.
            store: Rating store shared across coaches. One is built from
                config if omitted.
            speech_analyzer: Speech analyzer. Defaults to the OpenAI-backed
                SpeechAnalyzer, created on first use.
            visual_analyzer: Visual analyzer. Defaults to MockVisualAnalyzer.
            clock: Returns the current time in seconds since the epoch.
        """
        self.config = config or Config()
        self.aggregator = SessionAggregator(user_id, store=store, config=self.config, clock=clock)
        self._speech_analyzer = speech_analyzer
        self._visual_analyzer = visual_analyzer

    @classmethod
    def from_config(cls, path: str | Path, user_id: str = "default") -> Coach:
        """Create a Coach from a YAML configuration file.

        Args:
            path: Path to the YAML configuration file.
            user_id: The user practicing.

        Example:
            ```python
            coach = Coach.from_config("./eloquence.yaml", user_id="alice")
            ```
        """
        return cls(user_id=user_id, config=Config.from_yaml(path))

    @property
    def user_id(self) -> str:
        return self.aggregator.user_id

    @property
    def rating(self) -> UserRating:
        """The user's rating record."""
        return self.aggregator.store.get(self.user_id)

    def _get_speech_analyzer(self) -> BaseSpeechAnalyzer:
        """Get or create the speech analyzer."""
        if self._speech_analyzer is None:
            self._speech_analyzer = SpeechAnalyzer.from_config(self.config)
        return self._speech_analyzer

    def _get_visual_analyzer(self) -> BaseVisualAnalyzer:
        """Get or create the visual analyzer."""
        if self._visual_analyzer is None:
            self._visual_analyzer = MockVisualAnalyzer()
        return self._visual_analyzer

    async def _run_analysis(self, modality: str, work: Awaitable[T]) -> T | None:
        """Await an analyzer call, logging failures instead of raising them."""
        try:
            return await asyncio.wait_for(work, timeout=self.config.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(
                f"{modality} analysis timed out after {self.config.timeout_seconds}s"
            )
        except AnalysisError as e:
            logger.error(str(e))
        return None

    def start(self, session_id: str | None = None) -> SessionRecord:
        """Start a practice session.

        Raises:
            SessionAlreadyActiveError: If a session is already running.
        """
        return self.aggregator.start_session(session_id)

    async def submit_audio(
        self,
        audio: bytes,
        duration: float | None = None,
    ) -> SpeechFeedback | None:
        """Analyze an audio chunk and record the feedback.

        Args:
            audio: Encoded audio (webm, wav, mp3...).
            duration: Length of the chunk in seconds, if known.

        Returns:
            The feedback, or None if analysis failed or no session was
            active to record it.
        """
        if not self.aggregator.is_active:
            logger.debug("Skipping audio: no active session")
            return None

        analyzer = self._get_speech_analyzer()
        feedback = await self._run_analysis("speech", analyzer.analyze(audio, duration))
        if feedback is None or not self.aggregator.record_speech_feedback(feedback):
            return None
        return feedback

    async def submit_transcript(
        self,
        transcript: str,
        duration: float | None = None,
    ) -> SpeechFeedback | None:
        """Score an already transcribed utterance and record the feedback."""
        if not self.aggregator.is_active:
            logger.debug("Skipping transcript: no active session")
            return None

        analyzer = self._get_speech_analyzer()
        feedback = await self._run_analysis(
            "speech", analyzer.analyze_transcript(transcript, duration)
        )
        if feedback is None or not self.aggregator.record_speech_feedback(feedback):
            return None
        return feedback

    async def submit_frame(self, frame: bytes | None = None) -> VisualFeedback | None:
        """Analyze a camera frame and record the feedback."""
        if not self.aggregator.is_active:
            logger.debug("Skipping frame: no active session")
            return None

        analyzer = self._get_visual_analyzer()
        feedback = await self._run_analysis("visual", analyzer.analyze(frame))
        if feedback is None or not self.aggregator.record_visual_feedback(feedback):
            return None
        return feedback

    def end(self) -> SessionOutcome:
        """End the session and update the rating.

        Raises:
            NoActiveSessionError: If no session is running.
        """
        return self.aggregator.end_session()

    def reset(self) -> None:
        """Discard the active session without scoring it."""
        self.aggregator.reset()

    def history(self) -> list[SessionRecord]:
        """Past sessions, most recent first."""
        return self.aggregator.get_session_history()

    async def close(self) -> None:
        """Close analyzer clients."""
        if self._speech_analyzer is not None:
            await self._speech_analyzer.close()
        if self._visual_analyzer is not None:
            await self._visual_analyzer.close()

    async def __aenter__(self) -> Coach:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
