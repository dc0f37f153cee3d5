"""Speech analyzers.

This module implements speech analysis on top of the OpenAI API:
- SpeechAnalyzer: Whisper transcription plus chat-completion tone detection
- MockSpeechAnalyzer: Deterministic analysis for tests, no API calls
"""

from __future__ import annotations

import logging
import os

import openai

from ..config import Config
from ..exceptions import AnalysisError, APIKeyError
from ..models import Tone
from .base import BaseSpeechAnalyzer
from .feedback import FeedbackGenerator
from .heuristics import parse_json_response

logger = logging.getLogger(__name__)

TONE_EMOTIONS = ("confident", "nervous", "enthusiastic", "monotone", "engaging")

TONE_SYSTEM_PROMPT = (
    "Analyze the emotional tone of this speech. You MUST respond with only a "
    'valid JSON object with an "emotion" key (one of: '
    + ", ".join(TONE_EMOTIONS)
    + ') and a "score" key (0-100). Do not include any other text, '
    "explanation, or markdown formatting."
)

# Returned whenever tone detection fails
NEUTRAL_TONE = Tone(emotion="confident", score=50)


def parse_tone(response_text: str) -> Tone:
    """Parse a tone reply, falling back to a neutral tone for bad output."""
    try:
        data = parse_json_response(response_text)
    except ValueError:
        logger.warning("Tone reply was not valid JSON, using neutral tone")
        return NEUTRAL_TONE.model_copy()

    if not isinstance(data, dict):
        return NEUTRAL_TONE.model_copy()

    emotion = data.get("emotion")
    if emotion not in TONE_EMOTIONS:
        emotion = NEUTRAL_TONE.emotion
    score = data.get("score")
    if score is None:
        score = NEUTRAL_TONE.score
    try:
        return Tone(emotion=emotion, score=score)
    except ValueError:
        return Tone(emotion=emotion, score=NEUTRAL_TONE.score)


class SpeechAnalyzer(BaseSpeechAnalyzer):
    """Speech analyzer using OpenAI Whisper and chat completions.

    Example:
        ```python
        async with SpeechAnalyzer(feedback_generator=FeedbackGenerator()) as analyzer:
            feedback = await analyzer.analyze(webm_bytes, duration=12.5)
            aggregator.record_speech_feedback(feedback)
        ```
    """

    def __init__(
        self,
        transcription_model: str = "whisper-1",
        analysis_model: str = "gpt-4o",
        temperature: float = 0.3,
        api_key: str | None = None,
        feedback_generator: FeedbackGenerator | None = None,
        language: str = "en",
    ):
        """Initialize the speech analyzer.

        Args:
            transcription_model: OpenAI transcription model.
            analysis_model: OpenAI chat model used for tone detection.
            temperature: Temperature for tone detection.
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var).
            feedback_generator: Optional generator for LLM coaching notes.
                Rule-based notes are used when omitted.
            language: Spoken language hint for transcription.
        """
        self.transcription_model = transcription_model
        self.analysis_model = analysis_model
        self.temperature = temperature
        self.feedback_generator = feedback_generator
        self.language = language
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self._client: openai.AsyncOpenAI | None = None

    @classmethod
    def from_config(cls, config: Config, with_notes: bool = True) -> SpeechAnalyzer:
        """Build an analyzer from a Config.

        Args:
            config: Settings to read models and keys from.
            with_notes: Attach a Claude FeedbackGenerator for coaching notes.
        """
        generator = None
        if with_notes:
            generator = FeedbackGenerator(
                model=config.feedback_model,
                api_key=config.anthropic_api_key,
            )
        return cls(
            transcription_model=config.transcription_model,
            analysis_model=config.analysis_model,
            temperature=config.temperature,
            api_key=config.openai_api_key,
            feedback_generator=generator,
        )

    def _get_client(self) -> openai.AsyncOpenAI:
        """Get or create the OpenAI client.

        Raises:
            APIKeyError: If no API key is available.
        """
        if not self._api_key:
            raise APIKeyError("OpenAI", "OPENAI_API_KEY")

        if self._client is None:
            self._client = openai.AsyncOpenAI(api_key=self._api_key)

        return self._client

    async def transcribe(self, audio: bytes, filename: str = "audio.webm") -> str:
        """Transcribe audio with Whisper.

        Raises:
            AnalysisError: If the API call fails or returns no text.
        """
        if not audio:
            raise AnalysisError("no audio data", modality="speech")

        client = self._get_client()
        logger.debug(f"Transcribing {len(audio)} bytes of audio")
        try:
            response = await client.audio.transcriptions.create(
                model=self.transcription_model,
                file=(filename, audio),
                response_format="text",
                language=self.language,
            )
        except openai.APIError as e:
            logger.error(f"OpenAI transcription error: {e}")
            raise AnalysisError(f"transcription failed: {e}", modality="speech") from e

        transcript = response if isinstance(response, str) else getattr(response, "text", "")
        transcript = transcript.strip()
        if not transcript:
            raise AnalysisError("transcription returned no text", modality="speech")
        return transcript

    async def analyze_tone(self, transcript: str) -> Tone:
        """Detect tone with a chat completion. Never raises."""
        if not transcript.strip():
            return NEUTRAL_TONE.model_copy()

        try:
            client = self._get_client()
            response = await client.chat.completions.create(
                model=self.analysis_model,
                temperature=self.temperature,
                messages=[
                    {"role": "system", "content": TONE_SYSTEM_PROMPT},
                    {"role": "user", "content": transcript},
                ],
            )
        except (openai.APIError, APIKeyError) as e:
            logger.error(f"Tone analysis error: {e}")
            return NEUTRAL_TONE.model_copy()

        return parse_tone(response.choices[0].message.content or "{}")

    async def close(self) -> None:
        """Close the OpenAI client and any notes generator."""
        if self._client is not None:
            await self._client.close()
            self._client = None
        await super().close()


class MockSpeechAnalyzer(BaseSpeechAnalyzer):
    """Mock speech analyzer for testing purposes.

    Returns a fixed transcript for any audio and a fixed tone, so the
    resulting scores depend only on the transcript heuristics.

    Example:
        ```python
        analyzer = MockSpeechAnalyzer(transcript="Hello everyone. Thanks for coming.")
        feedback = await analyzer.analyze(b"...", duration=4.0)
        ```
    """

    DEFAULT_TRANSCRIPT = (
        "Good morning everyone. Today I want to talk about why practice matters. "
        "Every great speaker started somewhere, and the first step is showing up."
    )

    def __init__(
        self,
        transcript: str = DEFAULT_TRANSCRIPT,
        emotion: str = "confident",
        tone_score: int = 70,
    ):
        """Initialize the mock analyzer.

        Args:
            transcript: Transcript returned for every audio clip.
            emotion: Tone emotion to report.
            tone_score: Tone score to report.
        """
        self.transcript = transcript
        self.tone = Tone(emotion=emotion, score=tone_score)
        self.calls = 0

    async def transcribe(self, audio: bytes) -> str:
        self.calls += 1
        return self.transcript

    async def analyze_tone(self, transcript: str) -> Tone:
        return self.tone.model_copy()
