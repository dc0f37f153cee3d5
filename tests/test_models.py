"""Tests for Eloquence data models."""

import pytest
from pydantic import ValidationError

from eloquence import (
    RatingCategory,
    SessionRecord,
    SpeechFeedback,
    UserRating,
    VisualFeedback,
)
from eloquence.exceptions import InvalidStateError
from eloquence.models import FeedbackNotes, clamp_score, round_half_up


class TestRounding:
    """Tests for half-up rounding."""

    @pytest.mark.parametrize(
        "value,expected",
        [(2.5, 3), (3.5, 4), (1209.6, 1210), (1207.4, 1207), (-0.5, 0), (-1.6, -2), (74.0, 74)],
    )
    def test_round_half_up(self, value: float, expected: int) -> None:
        """Halves always round towards positive infinity."""
        assert round_half_up(value) == expected


class TestScoreClamping:
    """Tests for 0-100 score coercion."""

    @pytest.mark.parametrize(
        "value,expected",
        [(50, 50), (150, 100), (-5, 0), (72.5, 73), ("80", 80), (100.0, 100)],
    )
    def test_clamp_score(self, value: object, expected: int) -> None:
        """Numbers are clamped into range and rounded."""
        assert clamp_score(value) == expected

    @pytest.mark.parametrize("value", [None, True, "high", float("nan"), [80]])
    def test_unusable_scores(self, value: object) -> None:
        """Values that are not numbers are rejected."""
        with pytest.raises(ValueError):
            clamp_score(value)

    def test_feedback_scores_clamped(self) -> None:
        """Out-of-range scores from analyzers never reach the rating math."""
        assert SpeechFeedback(overall_score=250).overall_score == 100
        assert VisualFeedback(overall_score=-40).overall_score == 0

    def test_sub_scores_clamped(self) -> None:
        """Nested scores are clamped too."""
        feedback = SpeechFeedback.model_validate({"tone": {"emotion": "nervous", "score": 120}})
        assert feedback.tone.score == 100

    def test_non_numeric_score_rejected(self) -> None:
        """A score that is not a number fails validation."""
        with pytest.raises(ValidationError):
            SpeechFeedback.model_validate({"overallScore": "excellent"})


class TestWireFormat:
    """Tests for camelCase payloads."""

    def test_speech_from_camel_case(self) -> None:
        """Speech feedback parses the analyzer's JSON keys."""
        feedback = SpeechFeedback.model_validate(
            {
                "timestamp": 1700000000000,
                "transcript": "Hello everyone",
                "confidence": 0.9,
                "pace": {"wordsPerMinute": 140, "pauses": 3, "score": 85, "rhythm": "varied"},
                "fillerWords": {"count": 2, "words": ["um", "like"], "score": 80},
                "feedback": {"positive": ["Good pace"], "improvements": [], "suggestions": []},
                "detailedInsights": ["Strong opening"],
                "overallScore": 78,
            }
        )
        assert feedback.pace.words_per_minute == 140
        assert feedback.filler_words.words == ["um", "like"]
        assert feedback.notes.positive == ["Good pace"]
        assert feedback.insights == ["Strong opening"]
        assert feedback.overall_score == 78

    def test_speech_by_field_name(self) -> None:
        """Snake_case field names work as well."""
        feedback = SpeechFeedback(overall_score=60, notes=FeedbackNotes(positive=["ok"]))
        assert feedback.notes.positive == ["ok"]

    def test_dump_by_alias(self) -> None:
        """Dumping by alias produces camelCase keys."""
        data = VisualFeedback(overall_score=70).model_dump(by_alias=True)
        assert data["overallScore"] == 70
        assert "eyeContact" in data
        assert "bodyLanguage" in data
        assert "feedback" in data

    def test_visual_from_camel_case(self) -> None:
        """Visual feedback parses nested camelCase keys."""
        feedback = VisualFeedback.model_validate(
            {
                "eyeContact": {"percentage": 72.0, "duration": 0.8, "score": 75},
                "facialExpression": {"emotion": "confident", "confidence": 0.7, "score": 68},
                "bodyLanguage": {"openness": 60, "energy": 55, "engagement": 70, "overall": 62},
                "overallScore": 66,
            }
        )
        assert feedback.eye_contact.score == 75
        assert feedback.facial_expression.emotion == "confident"
        assert feedback.body_language.overall == 62

    def test_defaults(self) -> None:
        """Missing sections fall back to empty defaults."""
        feedback = SpeechFeedback()
        assert feedback.overall_score == 0
        assert feedback.tone.emotion == "confident"
        assert feedback.filler_words.score == 100
        assert feedback.notes.positive == []


class TestSessionRecord:
    """Tests for SessionRecord."""

    def test_new_record_is_active(self) -> None:
        """Records start active and unscored."""
        record = SessionRecord(session_id="s1", start_time=1_000)
        assert record.is_active
        assert record.combined_score is None
        assert record.rating_delta is None

    def test_finalize(self) -> None:
        """Finalizing fills in the end time, score and ratings."""
        record = SessionRecord(session_id="s1", start_time=1_000)
        record.finalize(end_time=46_000, combined_score=74, rating_before=1200, rating_after=1210)

        assert not record.is_active
        assert record.end_time == 46_000
        assert record.duration == 45.0
        assert record.combined_score == 74
        assert record.rating_delta == 10

    def test_finalize_once(self) -> None:
        """A finalized record cannot be finalized again."""
        record = SessionRecord(session_id="s1", start_time=1_000)
        record.finalize(2_000, 50, 1200, 1200)
        with pytest.raises(InvalidStateError, match="already finalized"):
            record.finalize(3_000, 90, 1200, 1216)
        assert record.combined_score == 50

    def test_finalize_at_epoch_zero(self) -> None:
        """A record started at time 0 still closes."""
        record = SessionRecord(session_id="s1", start_time=0)
        record.finalize(0, 0, 1200, 1180)
        assert not record.is_active


class TestUserRating:
    """Tests for UserRating."""

    def test_defaults(self) -> None:
        """New ratings start at 1200 with no progress."""
        rating = UserRating(user_id="alice")
        assert rating.current_rating == 1200
        assert rating.total_sessions == 0
        assert rating.xp == 0
        assert rating.streak == 0
        assert rating.last_session_date is None

    def test_category(self) -> None:
        """The tier follows the current rating."""
        assert UserRating(user_id="a", current_rating=1850).category == RatingCategory.MASTER
        assert UserRating(user_id="a", current_rating=950).category == RatingCategory.NOVICE
