"""Base analyzer interfaces.

Analyzers are the producers that feed a practice session: speech analyzers
turn audio into SpeechFeedback, visual analyzers turn camera frames into
VisualFeedback. Both run outside the rating core and must never raise for
a bad score; they hand the core a feedback object or nothing.
"""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod

from ..models import SpeechFeedback, Tone, VisualFeedback
from .feedback import FeedbackGenerator, default_notes
from .heuristics import (
    analyze_pacing,
    calculate_clarity,
    detect_filler_words,
    overall_speech_score,
    words_per_minute,
)


class BaseSpeechAnalyzer(ABC):
    """Abstract base class for speech analyzers.

    Subclasses provide transcription and tone detection. Filler words,
    pacing and clarity are scored here from the transcript.
    """

    feedback_generator: FeedbackGenerator | None = None

    @abstractmethod
    async def transcribe(self, audio: bytes) -> str:
        """Turn recorded audio into text.

        Raises:
            AnalysisError: If transcription fails.
        """
        ...

    @abstractmethod
    async def analyze_tone(self, transcript: str) -> Tone:
        """Detect the emotional tone of a transcript.

        Implementations return a neutral Tone rather than raising.
        """
        ...

    async def analyze_transcript(
        self,
        transcript: str,
        duration: float | None = None,
    ) -> SpeechFeedback:
        """Score a transcript.

        Args:
            transcript: The spoken text.
            duration: Length of the recording in seconds, if known.

        Returns:
            SpeechFeedback with sub-scores, overall score and coaching notes.
        """
        words = transcript.split()
        wpm = words_per_minute(len(words), duration)

        tone = await self.analyze_tone(transcript)
        pace = analyze_pacing(transcript, wpm)
        filler_words = detect_filler_words(transcript)
        clarity = calculate_clarity(words)

        feedback = SpeechFeedback(
            timestamp=int(time.time() * 1000),
            transcript=transcript,
            confidence=0.85,  # Whisper does not report a transcript confidence
            tone=tone,
            pace=pace,
            filler_words=filler_words,
            clarity=clarity,
            overall_score=overall_speech_score(tone, pace, filler_words, clarity),
        )

        if self.feedback_generator is not None:
            feedback.notes = await self.feedback_generator.generate_notes(feedback)
        else:
            feedback.notes = default_notes(feedback)
        return feedback

    async def analyze(self, audio: bytes, duration: float | None = None) -> SpeechFeedback:
        """Transcribe audio and score it."""
        transcript = await self.transcribe(audio)
        return await self.analyze_transcript(transcript, duration)

    def analyze_sync(self, audio: bytes, duration: float | None = None) -> SpeechFeedback:
        """Synchronous wrapper for analyze().

        For convenience when async is not needed.
        """
        return asyncio.run(self.analyze(audio, duration))

    async def close(self) -> None:
        """Release any clients held by the analyzer."""
        if self.feedback_generator is not None:
            await self.feedback_generator.close()

    async def __aenter__(self) -> BaseSpeechAnalyzer:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - cleanup resources."""
        await self.close()


class BaseVisualAnalyzer(ABC):
    """Abstract base class for visual analyzers."""

    @abstractmethod
    async def analyze(self, frame: bytes | None = None) -> VisualFeedback:
        """Analyze one camera frame (or frame batch).

        Args:
            frame: Encoded image data. Synthetic analyzers may ignore it.

        Returns:
            VisualFeedback for the frame.
        """
        ...

    def analyze_sync(self, frame: bytes | None = None) -> VisualFeedback:
        """Synchronous wrapper for analyze()."""
        return asyncio.run(self.analyze(frame))

    async def close(self) -> None:
        """Release any resources held by the analyzer."""
        pass
