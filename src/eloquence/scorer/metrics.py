"""Score combination for practice sessions.

This module provides the Scorer class, which turns the feedback collected
during a session into the single 0-100 combined score that drives the
rating, plus per-aspect breakdowns used for display.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..models import (
    SessionRecord,
    SpeechFeedback,
    VisualFeedback,
    clamp_score,
    round_half_up,
)

DEFAULT_SPEECH_WEIGHT = 0.7
DEFAULT_VISUAL_WEIGHT = 0.3


class Scorer:
    """Calculates session scores from accumulated feedback.

    Example:
        ```python
        avg_speech, avg_visual = Scorer.session_averages(record)
        combined = Scorer.combine_scores(avg_speech, avg_visual)

        # Speech 80, visual 60 -> round(80 * 0.7 + 60 * 0.3)
        Scorer.combine_scores(80, 60)  # 74
        ```
    """

    @staticmethod
    def average_score(
        feedback: Sequence[SpeechFeedback] | Sequence[VisualFeedback],
    ) -> float:
        """Mean overall_score of a feedback list, 0.0 when empty."""
        if not feedback:
            return 0.0
        return sum(clamp_score(f.overall_score) for f in feedback) / len(feedback)

    @staticmethod
    def session_averages(record: SessionRecord) -> tuple[float, float]:
        """Average speech and visual scores of a session.

        Returns:
            Tuple of (avg_speech_score, avg_visual_score).
        """
        return (
            Scorer.average_score(record.speech_feedback),
            Scorer.average_score(record.visual_feedback),
        )

    @staticmethod
    def combine_scores(
        avg_speech: float,
        avg_visual: float,
        speech_weight: float = DEFAULT_SPEECH_WEIGHT,
        visual_weight: float = DEFAULT_VISUAL_WEIGHT,
    ) -> int:
        """Combine per-modality averages into one 0-100 score.

        A modality counts as present when its average is above zero:
        - both present: weighted average
        - only visual present: the visual average
        - otherwise: the speech average (0 when nothing was recorded)

        Args:
            avg_speech: Mean speech score.
            avg_visual: Mean visual score.
            speech_weight: Weight of speech when both are present.
            visual_weight: Weight of visual when both are present.

        Returns:
            Combined score, rounded half-up and clamped into 0-100.
        """
        if avg_speech > 0 and avg_visual > 0:
            combined = avg_speech * speech_weight + avg_visual * visual_weight
        elif avg_visual > 0:
            combined = avg_visual
        else:
            combined = avg_speech
        return clamp_score(round_half_up(combined))

    @staticmethod
    def score_session(
        record: SessionRecord,
        speech_weight: float = DEFAULT_SPEECH_WEIGHT,
        visual_weight: float = DEFAULT_VISUAL_WEIGHT,
    ) -> tuple[int, float, float]:
        """Score a session from its accumulated feedback.

        Returns:
            Tuple of (combined_score, avg_speech_score, avg_visual_score).
        """
        avg_speech, avg_visual = Scorer.session_averages(record)
        combined = Scorer.combine_scores(
            avg_speech, avg_visual, speech_weight, visual_weight
        )
        return combined, avg_speech, avg_visual

    @staticmethod
    def speech_breakdown(feedback: Sequence[SpeechFeedback]) -> dict[str, float]:
        """Mean of each speech sub-score, for display only."""
        if not feedback:
            return {}
        n = len(feedback)
        return {
            "tone": sum(f.tone.score for f in feedback) / n,
            "pace": sum(f.pace.score for f in feedback) / n,
            "filler_words": sum(f.filler_words.score for f in feedback) / n,
            "clarity": sum(f.clarity.overall for f in feedback) / n,
        }

    @staticmethod
    def visual_breakdown(feedback: Sequence[VisualFeedback]) -> dict[str, float]:
        """Mean of each visual sub-score, for display only."""
        if not feedback:
            return {}
        n = len(feedback)
        return {
            "eye_contact": sum(f.eye_contact.score for f in feedback) / n,
            "facial_expression": sum(f.facial_expression.score for f in feedback) / n,
            "posture": sum(f.posture.score for f in feedback) / n,
            "gestures": sum(f.gestures.score for f in feedback) / n,
            "body_language": sum(f.body_language.overall for f in feedback) / n,
        }
