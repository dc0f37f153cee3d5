"""Tests for the scorer module."""

import pytest

from eloquence import Scorer, SessionRecord, SpeechFeedback, VisualFeedback


def make_record(speech: list[int], visual: list[int]) -> SessionRecord:
    """Build an active record holding the given overall scores."""
    return SessionRecord(
        session_id="s1",
        start_time=1,
        speech_feedback=[SpeechFeedback(overall_score=s) for s in speech],
        visual_feedback=[VisualFeedback(overall_score=v) for v in visual],
    )


class TestCombineScores:
    """Tests for Scorer.combine_scores."""

    def test_both_modalities(self) -> None:
        """80 * 0.7 + 60 * 0.3 = 74."""
        assert Scorer.combine_scores(80, 60) == 74

    def test_visual_only(self) -> None:
        """With no speech the visual average is used as is."""
        assert Scorer.combine_scores(0, 90) == 90

    def test_speech_only(self) -> None:
        """With no visual the speech average is used as is."""
        assert Scorer.combine_scores(85, 0) == 85

    def test_nothing_recorded(self) -> None:
        """An empty session scores 0."""
        assert Scorer.combine_scores(0, 0) == 0

    def test_custom_weights(self) -> None:
        """Weights are configurable."""
        assert Scorer.combine_scores(80, 60, speech_weight=0.5, visual_weight=0.5) == 70

    def test_fractional_averages(self) -> None:
        """Averages may be fractional; the result is a whole number."""
        result = Scorer.combine_scores(77.5, 66.25)
        assert isinstance(result, int)
        assert result == 74

    def test_result_in_range(self) -> None:
        """The combined score never leaves 0-100."""
        assert Scorer.combine_scores(100, 100) == 100
        assert 0 <= Scorer.combine_scores(1, 1) <= 100


class TestAverages:
    """Tests for per-modality averaging."""

    def test_average_score(self) -> None:
        """Mean of overall scores."""
        feedback = [SpeechFeedback(overall_score=70), SpeechFeedback(overall_score=85)]
        assert Scorer.average_score(feedback) == pytest.approx(77.5)

    def test_average_of_nothing(self) -> None:
        """No feedback averages to 0."""
        assert Scorer.average_score([]) == 0.0

    def test_session_averages(self) -> None:
        """Averages are computed per modality."""
        record = make_record([80, 80], [60])
        assert Scorer.session_averages(record) == (80.0, 60.0)

    def test_score_session(self) -> None:
        """score_session combines the averages of a record."""
        combined, avg_speech, avg_visual = Scorer.score_session(make_record([80, 80], [60]))
        assert combined == 74
        assert avg_speech == 80.0
        assert avg_visual == 60.0

    def test_score_visual_only_session(self) -> None:
        """A session with only visual feedback scores its visual average."""
        combined, _, _ = Scorer.score_session(make_record([], [90, 90]))
        assert combined == 90


class TestBreakdowns:
    """Tests for display breakdowns."""

    def test_speech_breakdown(self) -> None:
        """Sub-scores are averaged per aspect."""
        feedback = [
            SpeechFeedback.model_validate({"tone": {"score": 60}, "clarity": {"overall": 90}}),
            SpeechFeedback.model_validate({"tone": {"score": 80}, "clarity": {"overall": 70}}),
        ]
        breakdown = Scorer.speech_breakdown(feedback)
        assert set(breakdown) == {"tone", "pace", "filler_words", "clarity"}
        assert breakdown["tone"] == 70
        assert breakdown["clarity"] == 80

    def test_visual_breakdown(self) -> None:
        """Visual aspects include body language."""
        feedback = [VisualFeedback.model_validate({"eyeContact": {"score": 40}})]
        breakdown = Scorer.visual_breakdown(feedback)
        assert breakdown["eye_contact"] == 40
        assert "body_language" in breakdown

    def test_empty_breakdowns(self) -> None:
        """Nothing recorded, nothing to show."""
        assert Scorer.speech_breakdown([]) == {}
        assert Scorer.visual_breakdown([]) == {}
