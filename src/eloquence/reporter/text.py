"""Text reporter for Eloquence results.

Provides human-readable formatting for session outcomes, session records,
ratings and session history.
"""

from __future__ import annotations

from datetime import datetime

from ..models import SessionOutcome, SessionRecord, UserRating
from ..scorer import Scorer


class TextReporter:
    """Formats results as human-readable text.

    Example:
        ```python
        reporter = TextReporter()
        print(reporter.format_outcome(outcome))
        ```
    """

    BAR_WIDTH = 30

    @staticmethod
    def _bar(fraction: float, width: int = 30) -> str:
        """Render a simple bar chart segment."""
        fraction = min(max(fraction, 0.0), 1.0)
        filled = round(fraction * width)
        return "█" * filled + "░" * (width - filled)

    @staticmethod
    def _signed(delta: int) -> str:
        return f"+{delta}" if delta > 0 else str(delta)

    @staticmethod
    def _timestamp(ms: int) -> str:
        return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M")

    def format_outcome(self, outcome: SessionOutcome) -> str:
        """Format a SessionOutcome as text.

        Args:
            outcome: The outcome returned by end_session().

        Returns:
            Formatted string.
        """
        return "\n".join([
            f"Session: {outcome.session_id}",
            f"{'=' * 50}",
            f"Score:  {self._bar(outcome.combined_score / 100)} {outcome.combined_score} / 100",
            f"Speech: {self._bar(outcome.avg_speech_score / 100)} {outcome.avg_speech_score:.1f}",
            f"Visual: {self._bar(outcome.avg_visual_score / 100)} {outcome.avg_visual_score:.1f}",
            "",
            f"Rating: {outcome.previous_rating} -> {outcome.new_rating} "
            f"({self._signed(outcome.rating_delta)})",
            f"Tier:   {outcome.category.value}",
        ])

    def format_session(self, record: SessionRecord) -> str:
        """Format a SessionRecord with per-aspect breakdowns.

        Args:
            record: The session to format, active or finalized.

        Returns:
            Formatted string.
        """
        status = "active" if record.is_active else f"{record.duration:.1f}s"
        lines = [
            f"Session: {record.session_id} ({status})",
            f"{'=' * 50}",
            f"Started: {self._timestamp(record.start_time)}",
            f"Feedback: {len(record.speech_feedback)} speech, "
            f"{len(record.visual_feedback)} visual",
        ]

        if record.combined_score is not None:
            lines.append(
                f"Score: {record.combined_score} / 100  "
                f"(rating {record.rating_before} -> {record.rating_after}, "
                f"{self._signed(record.rating_delta or 0)})"
            )

        speech = Scorer.speech_breakdown(record.speech_feedback)
        if speech:
            lines.append("")
            lines.append("Speech:")
            for aspect, score in speech.items():
                lines.append(f"  {aspect:<18s} {self._bar(score / 100, 20)} {score:.0f}")

        visual = Scorer.visual_breakdown(record.visual_feedback)
        if visual:
            lines.append("")
            lines.append("Visual:")
            for aspect, score in visual.items():
                lines.append(f"  {aspect:<18s} {self._bar(score / 100, 20)} {score:.0f}")

        # Notes from the most recent feedback of each kind
        latest = [fb[-1].notes for fb in (record.speech_feedback, record.visual_feedback) if fb]
        suggestions = [s for notes in latest for s in notes.suggestions]
        if suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for suggestion in suggestions:
                lines.append(f"  - {suggestion}")

        return "\n".join(lines)

    def format_rating(self, rating: UserRating) -> str:
        """Format a UserRating as text.

        Args:
            rating: The rating to format.

        Returns:
            Formatted string.
        """
        change = rating.current_rating - rating.previous_rating
        return "\n".join([
            f"Rating: {rating.user_id}",
            f"{'=' * 50}",
            f"Elo:      {rating.current_rating} ({rating.category.value}, "
            f"last {self._signed(change)})",
            f"Sessions: {rating.total_sessions}",
            f"Best:     {rating.best_score} / 100",
            f"Average:  {self._bar(rating.average_score / 100)} {rating.average_score:.1f}",
            f"XP:       {rating.xp}",
            f"Streak:   {rating.streak} day(s)",
        ])

    def format_history(self, history: list[SessionRecord]) -> str:
        """Format a session history as a table, most recent first.

        Args:
            history: Records as returned by get_session_history().

        Returns:
            Formatted string.
        """
        lines = [
            "Session History",
            f"{'=' * 50}",
            f"  {'Session':<20} {'Started':<17} {'Score':>5} {'Rating':>7} {'Delta':>6}",
            f"  {'-' * 59}",
        ]

        if not history:
            lines.append("  (no sessions)")

        for record in history:
            if record.is_active:
                score, rating, delta = "-", "-", "active"
            else:
                score = str(record.combined_score)
                rating = str(record.rating_after)
                delta = self._signed(record.rating_delta or 0)
            lines.append(
                f"  {record.session_id[:20]:<20} {self._timestamp(record.start_time):<17} "
                f"{score:>5} {rating:>7} {delta:>6}"
            )

        return "\n".join(lines)


def print_outcome(outcome: SessionOutcome | SessionRecord | UserRating) -> None:
    """Convenience function to print formatted results.

    Automatically detects the result type and prints the appropriate format.

    Args:
        outcome: A SessionOutcome, SessionRecord or UserRating.

    Example:
        ```python
        from eloquence import Coach, print_outcome

        print_outcome(coach.end())
        ```
    """
    reporter = TextReporter()

    if isinstance(outcome, SessionOutcome):
        print(reporter.format_outcome(outcome))
    elif isinstance(outcome, SessionRecord):
        print(reporter.format_session(outcome))
    elif isinstance(outcome, UserRating):
        print(reporter.format_rating(outcome))
    else:
        raise TypeError(f"Unsupported result type: {type(outcome).__name__}")
