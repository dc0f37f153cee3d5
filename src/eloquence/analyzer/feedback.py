"""LLM-powered coaching notes.

This module provides the FeedbackGenerator class that uses Claude to turn
the numbers in a SpeechFeedback into encouraging, specific coaching notes.
When the API is unavailable or replies with something unusable, rule-based
notes are returned instead so that feedback always has notes attached.
"""

from __future__ import annotations

import logging
import os

import anthropic

from ..config import Config
from ..exceptions import APIKeyError
from ..models import FeedbackNotes, SpeechFeedback
from .heuristics import parse_json_response

logger = logging.getLogger(__name__)

NOTES_PROMPT = '''You are an empathetic public speaking coach reviewing a practice speech.

## Speech Analysis
- Transcript: "{transcript}"
- Tone: {emotion} (score: {tone_score}/100)
- Pace: {wpm} WPM, {rhythm} rhythm, {consistency}/100 consistency (score: {pace_score}/100)
- Filler words: {filler_count} detected ({filler_words}) (score: {filler_score}/100)
- Clarity: {clarity}/100 (articulation: {articulation})
{insights}
## Instructions
Write constructive feedback. Be encouraging but honest, and give specific,
actionable advice grounded in the analysis above.

## Output Format
Return a JSON object:
{{
  "positive": ["2-3 specific things the speaker did well"],
  "improvements": ["2-3 specific areas to improve, with concrete examples"],
  "suggestions": ["2-3 actionable suggestions for the next session"]
}}

Return ONLY the JSON object, no other text.'''

# Sub-scores above this count as strengths in the rule-based notes
STRENGTH_THRESHOLD = 70


def default_notes(feedback: SpeechFeedback) -> FeedbackNotes:
    """Rule-based coaching notes derived from the sub-scores."""
    notes = FeedbackNotes()

    if feedback.tone.score > STRENGTH_THRESHOLD:
        notes.positive.append("Great emotional tone and confidence!")
    else:
        notes.improvements.append("Work on projecting more confidence in your voice.")
        notes.suggestions.append("Practice power poses before speaking to boost confidence.")

    if feedback.pace.score > STRENGTH_THRESHOLD:
        notes.positive.append("Excellent speaking pace and rhythm.")
    else:
        notes.improvements.append("Your speaking pace could be more consistent.")
        notes.suggestions.append("Practice with a metronome to improve timing.")

    if feedback.filler_words.score > STRENGTH_THRESHOLD:
        notes.positive.append("Clean speech with minimal filler words.")
    else:
        notes.improvements.append('Reduce the use of filler words like "um" and "uh".')
        notes.suggestions.append("Practice pausing instead of using filler words.")

    if feedback.clarity.overall > STRENGTH_THRESHOLD:
        notes.positive.append("Clear and well-articulated speech.")
    else:
        notes.improvements.append("Focus on clearer pronunciation and articulation.")
        notes.suggestions.append("Practice tongue twisters to improve articulation.")

    if not notes.positive:
        notes.positive.append("Good effort on your speech!")
    if not notes.improvements:
        notes.improvements.append("Keep practicing to improve your public speaking skills.")
    if not notes.suggestions:
        notes.suggestions.append("Record yourself speaking and review for improvement.")

    return notes


class FeedbackGenerator:
    """Generates coaching notes for speech feedback using Claude.

    Attributes:
        model: The Claude model to use.
        temperature: Sampling temperature.

    Example:
        ```python
        generator = FeedbackGenerator()
        notes = await generator.generate_notes(speech_feedback)
        print(notes.suggestions)
        ```
    """

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        temperature: float = 0.7,
        api_key: str | None = None,
        config: Config | None = None,
    ):
        """Initialize the feedback generator.

        Args:
            model: Claude model to use.
            temperature: Temperature for generation (0.0-2.0).
            api_key: Anthropic API key. If not provided, uses config or env var.
            config: Optional Config object to get settings from.
        """
        self.model = model
        self.temperature = temperature

        if api_key:
            self._api_key = api_key
        elif config and config.anthropic_api_key:
            self._api_key = config.anthropic_api_key
        else:
            self._api_key = None  # Read from ANTHROPIC_API_KEY on first use

        self._client: anthropic.AsyncAnthropic | None = None

    def _get_client(self) -> anthropic.AsyncAnthropic:
        """Get or create the Anthropic client.

        Raises:
            APIKeyError: If no API key is passed, configured or set in the env.
        """
        if self._client is None:
            api_key = self._api_key or os.environ.get("ANTHROPIC_API_KEY")
            if not api_key:
                raise APIKeyError("Anthropic", "ANTHROPIC_API_KEY")
            self._client = anthropic.AsyncAnthropic(api_key=api_key)
        return self._client

    def build_prompt(self, feedback: SpeechFeedback) -> str:
        """Build the coaching prompt for a feedback entry."""
        insights = ""
        if feedback.insights:
            insights = "\n## Key Insights\n" + "\n".join(f"- {i}" for i in feedback.insights) + "\n"

        return NOTES_PROMPT.format(
            transcript=feedback.transcript,
            emotion=feedback.tone.emotion,
            tone_score=feedback.tone.score,
            wpm=feedback.pace.words_per_minute,
            rhythm=feedback.pace.rhythm,
            consistency=feedback.pace.consistency,
            pace_score=feedback.pace.score,
            filler_count=feedback.filler_words.count,
            filler_words=", ".join(feedback.filler_words.words) or "none",
            filler_score=feedback.filler_words.score,
            clarity=feedback.clarity.overall,
            articulation=feedback.clarity.articulation,
            insights=insights,
        )

    def parse_notes(self, response_text: str) -> FeedbackNotes:
        """Parse Claude's reply into FeedbackNotes.

        Raises:
            ValueError: If the reply is not a JSON object.
        """
        data = parse_json_response(response_text)
        if not isinstance(data, dict):
            raise ValueError(f"Expected JSON object, got {type(data).__name__}")
        return FeedbackNotes.model_validate(data)

    async def generate_notes(self, feedback: SpeechFeedback) -> FeedbackNotes:
        """Generate coaching notes, falling back to rule-based notes on failure."""
        try:
            client = self._get_client()
            response = await client.messages.create(
                model=self.model,
                max_tokens=600,
                temperature=self.temperature,
                messages=[{"role": "user", "content": self.build_prompt(feedback)}],
            )
        except APIKeyError as e:
            logger.warning(f"Using rule-based coaching notes: {e}")
            return default_notes(feedback)
        except anthropic.APIError as e:
            logger.error(f"Anthropic API error: {e}")
            return default_notes(feedback)

        response_text = ""
        for block in response.content:
            if block.type == "text":
                response_text += block.text

        try:
            return self.parse_notes(response_text)
        except ValueError as e:
            logger.warning(f"Could not parse coaching notes, using defaults: {e}")
            return default_notes(feedback)

    async def close(self) -> None:
        """Close the underlying client."""
        if self._client is not None:
            await self._client.close()
            self._client = None
