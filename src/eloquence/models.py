"""Core data models for Eloquence.

This module defines the data structures shared by the rating core and the
analyzers that feed it:
- SpeechFeedback / VisualFeedback: per-modality feedback pushed during a session
- SessionRecord: one practice session, from start to finalization
- UserRating: a user's long-lived Elo rating and progression
- SessionOutcome: what end_session() reports back to the caller

Feedback models accept the camelCase keys used on the wire
(``overallScore``, ``eyeContact``...) as well as the snake_case field names.
"""

from __future__ import annotations

import math
from datetime import date
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .exceptions import InvalidStateError

SCORE_MIN = 0
SCORE_MAX = 100


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return math.floor(value + 0.5)


def clamp_score(value: Any) -> int:
    """Coerce a 0-100 score, clamping out-of-range values instead of failing."""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"score must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"score must be a number, got {value!r}") from e
    if math.isnan(number):
        raise ValueError("score must not be NaN")
    return round_half_up(min(max(number, SCORE_MIN), SCORE_MAX))


Score = Annotated[int, BeforeValidator(clamp_score)]


class RatingCategory(str, Enum):
    """Named tiers for Elo ratings."""

    GRANDMASTER = "Grandmaster"
    MASTER = "Master"
    EXPERT = "Expert"
    ADVANCED = "Advanced"
    INTERMEDIATE = "Intermediate"
    BEGINNER = "Beginner"
    NOVICE = "Novice"

    @classmethod
    def from_rating(cls, rating: float) -> RatingCategory:
        """Convert an Elo rating to its tier (lower bounds are inclusive)."""
        if rating >= 2000:
            return cls.GRANDMASTER
        elif rating >= 1800:
            return cls.MASTER
        elif rating >= 1600:
            return cls.EXPERT
        elif rating >= 1400:
            return cls.ADVANCED
        elif rating >= 1200:
            return cls.INTERMEDIATE
        elif rating >= 1000:
            return cls.BEGINNER
        else:
            return cls.NOVICE


class SkillLevel(str, Enum):
    """Speaker skill levels used by the synthetic visual analyzer."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class _WireModel(BaseModel):
    """Base for payloads that arrive as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FeedbackNotes(_WireModel):
    """Qualitative coaching notes attached to a feedback entry."""

    positive: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Speech
# ---------------------------------------------------------------------------


class Tone(_WireModel):
    emotion: str = "confident"
    score: Score = 50


class Pace(_WireModel):
    words_per_minute: int = 0
    pauses: int = 0
    score: Score = 0
    rhythm: str = "consistent"
    consistency: Score = 0


class FillerWords(_WireModel):
    count: int = 0
    words: list[str] = Field(default_factory=list)
    score: Score = 100


class Clarity(_WireModel):
    pronunciation: Score = 0
    volume: Score = 0
    articulation: Score = 0
    overall: Score = 0


class SpeechFeedback(_WireModel):
    """Transcript-based critique of one utterance or audio chunk.

    Only ``overall_score`` takes part in rating math. The sub-scores are
    carried for display.

    Attributes:
        timestamp: When the feedback was produced (ms since epoch).
        transcript: The transcribed text.
        confidence: Transcription confidence (0.0-1.0).
        tone: Detected emotion and tone score.
        pace: Words per minute, pauses, rhythm.
        filler_words: Filler word count and penalty score.
        clarity: Articulation and overall clarity.
        notes: Positive points, improvements and suggestions.
        insights: Free-form observations from the LLM critique.
        overall_score: Summary score, clamped into 0-100.
    """

    timestamp: int = 0
    transcript: str = ""
    confidence: float = 0.0
    tone: Tone = Field(default_factory=Tone)
    pace: Pace = Field(default_factory=Pace)
    filler_words: FillerWords = Field(default_factory=FillerWords)
    clarity: Clarity = Field(default_factory=Clarity)
    notes: FeedbackNotes = Field(default_factory=FeedbackNotes, alias="feedback")
    insights: list[str] = Field(default_factory=list, alias="detailedInsights")
    overall_score: Score = 0


# ---------------------------------------------------------------------------
# Visual
# ---------------------------------------------------------------------------


class EyeContact(_WireModel):
    percentage: float = 0.0
    duration: float = 0.0
    score: Score = 0


class FacialExpression(_WireModel):
    emotion: str = "neutral"
    confidence: float = 0.0
    score: Score = 0


class Posture(_WireModel):
    stance: str = "good"
    score: Score = 0


class Gestures(_WireModel):
    detected: list[str] = Field(default_factory=list)
    appropriateness: float = 0.0
    frequency: float = 0.0
    score: Score = 0


class BodyLanguage(_WireModel):
    openness: float = 0.0
    energy: float = 0.0
    engagement: float = 0.0
    overall: Score = 0


class VisualFeedback(_WireModel):
    """Gesture and posture analysis of one frame or frame batch.

    As with SpeechFeedback, only ``overall_score`` feeds the rating.
    """

    timestamp: int = 0
    eye_contact: EyeContact = Field(default_factory=EyeContact)
    facial_expression: FacialExpression = Field(default_factory=FacialExpression)
    posture: Posture = Field(default_factory=Posture)
    gestures: Gestures = Field(default_factory=Gestures)
    body_language: BodyLanguage = Field(default_factory=BodyLanguage)
    notes: FeedbackNotes = Field(default_factory=FeedbackNotes, alias="feedback")
    overall_score: Score = 0


# ---------------------------------------------------------------------------
# Sessions and ratings
# ---------------------------------------------------------------------------


class SessionRecord(BaseModel):
    """One practice session.

    Created empty at session start, appended to while active, finalized
    exactly once. ``combined_score`` stays None until ``end_time`` is set.

    Attributes:
        session_id: Opaque unique identifier.
        start_time: Session start (ms since epoch).
        end_time: Session end (ms since epoch), 0 while active.
        duration: Length in seconds, set at finalization.
        speech_feedback: Speech entries in arrival order.
        visual_feedback: Visual entries in arrival order.
        combined_score: Final 0-100 score, set at finalization.
        rating_before: User rating before this session was applied.
        rating_after: User rating after this session was applied.
        rating_delta: rating_after - rating_before.
    """

    session_id: str
    start_time: int
    end_time: int = 0
    duration: float = 0.0
    speech_feedback: list[SpeechFeedback] = Field(default_factory=list)
    visual_feedback: list[VisualFeedback] = Field(default_factory=list)
    combined_score: int | None = None
    rating_before: int | None = None
    rating_after: int | None = None
    rating_delta: int | None = None

    @property
    def is_active(self) -> bool:
        """Whether the session is still accepting feedback."""
        return self.end_time == 0

    def finalize(
        self,
        end_time: int,
        combined_score: int,
        rating_before: int,
        rating_after: int,
    ) -> None:
        """Close the record. Allowed once.

        Raises:
            InvalidStateError: If the record was already finalized.
        """
        if not self.is_active:
            raise InvalidStateError(f"Session '{self.session_id}' is already finalized")
        # A zero-length session on a coarse clock still has to read as closed
        self.end_time = max(end_time, self.start_time, 1)
        self.duration = (self.end_time - self.start_time) / 1000
        self.combined_score = combined_score
        self.rating_before = rating_before
        self.rating_after = rating_after
        self.rating_delta = rating_after - rating_before


class UserRating(BaseModel):
    """A user's long-lived rating and progression.

    Attributes:
        user_id: The user this rating belongs to.
        current_rating: Current Elo rating.
        previous_rating: Rating before the most recent session.
        total_sessions: Number of finalized sessions.
        best_score: Highest combined score so far.
        average_score: Mean combined score across sessions.
        last_updated: When the rating last changed (ms since epoch).
        xp: Experience points, +10 per completed session.
        streak: Consecutive practice days.
        last_session_date: Calendar day of the most recent session.
    """

    user_id: str
    current_rating: int = 1200
    previous_rating: int = 1200
    total_sessions: int = 0
    best_score: int = 0
    average_score: float = 0.0
    last_updated: int = 0
    xp: int = 0
    streak: int = 0
    last_session_date: date | None = None

    @property
    def category(self) -> RatingCategory:
        return RatingCategory.from_rating(self.current_rating)


class SessionOutcome(BaseModel):
    """Result of finalizing a session.

    Attributes:
        session_id: The finalized session.
        combined_score: Final 0-100 score.
        new_rating: Rating after the update.
        rating_delta: Change applied by this session.
        previous_rating: Rating before the update.
        category: Tier of the new rating.
        avg_speech_score: Mean speech score (0 if none recorded).
        avg_visual_score: Mean visual score (0 if none recorded).
    """

    session_id: str
    combined_score: int
    new_rating: int
    rating_delta: int
    previous_rating: int
    category: RatingCategory
    avg_speech_score: float = 0.0
    avg_visual_score: float = 0.0
