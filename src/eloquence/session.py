"""Session lifecycle and rating updates for one user.

The SessionAggregator owns a user's session history. It accepts feedback
from the speech and visual analyzers while a session is active, and at the
end of the session combines that feedback into one score and commits the
resulting rating through the RatingStore.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any

from .config import Config
from .exceptions import InvalidInputError, NoActiveSessionError, SessionAlreadyActiveError
from .models import RatingCategory, SessionOutcome, SessionRecord, SpeechFeedback, VisualFeedback
from .scorer import RatingStore, Scorer

logger = logging.getLogger(__name__)


def _coerce(feedback: Any, model: type, field: str):
    if isinstance(feedback, model):
        return feedback
    if isinstance(feedback, dict):
        return model.model_validate(feedback)
    raise InvalidInputError(
        f"expected {model.__name__} or dict, got {type(feedback).__name__}",
        field=field,
    )


class SessionAggregator:
    """Runs practice sessions for a single user.

    States are Idle (no session) and Active. start_session() moves to
    Active, feedback calls keep it there, end_session() scores the session,
    updates the rating and returns to Idle.

    Example:
        ```python
        store = RatingStore()
        aggregator = SessionAggregator("alice", store)

        aggregator.start_session("s1")
        aggregator.record_speech_feedback({"overallScore": 80})
        aggregator.record_visual_feedback({"overallScore": 60})
        outcome = aggregator.end_session()
        print(outcome.combined_score, outcome.new_rating)  # 74 1210
        ```
    """

    def __init__(
        self,
        user_id: str,
        store: RatingStore | None = None,
        config: Config | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the aggregator.

        Args:
            user_id: The user whose sessions this aggregator runs.
            store: Where the user's rating lives. Built from config if omitted.
            config: Optional configuration. Uses defaults if not provided.
            clock: Returns the current time in seconds since the epoch.
        """
        self.user_id = user_id
        self.config = config or Config()
        self.store = store or RatingStore.from_config(self.config)
        self._clock = clock
        self._lock = threading.RLock()
        self._history: list[SessionRecord] = []
        self._active: SessionRecord | None = None
        self._latest_speech: SpeechFeedback | None = None
        self._latest_visual: VisualFeedback | None = None

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    @property
    def is_active(self) -> bool:
        return self._active is not None

    @property
    def active_session(self) -> SessionRecord | None:
        """Copy of the running session, or None when idle."""
        with self._lock:
            if self._active is None:
                return None
            return self._active.model_copy(deep=True)

    @property
    def latest_speech_feedback(self) -> SpeechFeedback | None:
        """Most recent speech feedback, for live display."""
        return self._latest_speech

    @property
    def latest_visual_feedback(self) -> VisualFeedback | None:
        """Most recent visual feedback, for live display."""
        return self._latest_visual

    def start_session(self, session_id: str | None = None) -> SessionRecord:
        """Start a new session.

        Args:
            session_id: Identifier for the session. Generated if omitted.

        Returns:
            The new, active SessionRecord.

        Raises:
            SessionAlreadyActiveError: If a session is already running.
        """
        with self._lock:
            if self._active is not None:
                raise SessionAlreadyActiveError(self._active.session_id)

            record = SessionRecord(
                session_id=session_id or uuid.uuid4().hex,
                start_time=self._now_ms(),
            )
            self._history.insert(0, record)
            self._active = record
            self._latest_speech = None
            self._latest_visual = None

        logger.info(f"Session '{record.session_id}' started for '{self.user_id}'")
        return record

    def record_speech_feedback(self, feedback: SpeechFeedback | dict[str, Any]) -> bool:
        """Append speech feedback to the active session.

        Feedback that arrives with no active session is dropped.

        Returns:
            True if the feedback was recorded.
        """
        feedback = _coerce(feedback, SpeechFeedback, "speech_feedback")
        with self._lock:
            if self._active is None:
                logger.debug("Ignoring speech feedback: no active session")
                return False
            self._active.speech_feedback.append(feedback)
            self._latest_speech = feedback
        return True

    def record_visual_feedback(self, feedback: VisualFeedback | dict[str, Any]) -> bool:
        """Append visual feedback to the active session.

        Returns:
            True if the feedback was recorded.
        """
        feedback = _coerce(feedback, VisualFeedback, "visual_feedback")
        with self._lock:
            if self._active is None:
                logger.debug("Ignoring visual feedback: no active session")
                return False
            self._active.visual_feedback.append(feedback)
            self._latest_visual = feedback
        return True

    def end_session(self) -> SessionOutcome:
        """Finalize the active session and update the rating.

        Averages each modality, combines the averages into the session
        score, applies it to the user's rating and closes the record.

        Returns:
            SessionOutcome with the combined score, new rating and delta.

        Raises:
            NoActiveSessionError: If no session is running. A repeated call
                never applies the rating update twice.
        """
        with self._lock:
            record = self._active
            if record is None:
                raise NoActiveSessionError("end_session")

            end_time = self._now_ms()
            combined, avg_speech, avg_visual = Scorer.score_session(
                record,
                speech_weight=self.config.speech_weight,
                visual_weight=self.config.visual_weight,
            )
            if combined == 0:
                logger.warning(
                    f"Session '{record.session_id}' ended without usable feedback; "
                    "scoring it 0"
                )

            previous = self.store.get_rating(self.user_id)
            new_rating, delta = self.store.record_session(
                self.user_id,
                combined,
                when=datetime.fromtimestamp(end_time / 1000),
            )
            record.finalize(end_time, combined, previous, new_rating)
            self._active = None

        logger.info(
            f"Session '{record.session_id}' ended after {record.duration:.1f}s: "
            f"score={combined} (speech={avg_speech:.1f}, visual={avg_visual:.1f}), "
            f"rating {previous} -> {new_rating}"
        )
        return SessionOutcome(
            session_id=record.session_id,
            combined_score=combined,
            new_rating=new_rating,
            rating_delta=delta,
            previous_rating=previous,
            category=RatingCategory.from_rating(new_rating),
            avg_speech_score=avg_speech,
            avg_visual_score=avg_visual,
        )

    def reset(self) -> None:
        """Discard the active session without scoring it.

        The abandoned record is removed from the history and the rating is
        left untouched. Does nothing when idle.
        """
        with self._lock:
            if self._active is None:
                return
            self._history = [r for r in self._history if r is not self._active]
            logger.info(f"Session '{self._active.session_id}' discarded")
            self._active = None
            self._latest_speech = None
            self._latest_visual = None

    def get_session_history(self) -> list[SessionRecord]:
        """Sessions for this user, most recent first.

        Returns copies, so callers cannot alter finalized records. While a
        session is active it is the first entry, with end_time == 0.
        """
        with self._lock:
            return [record.model_copy(deep=True) for record in self._history]

    def get_current_rating(self) -> int:
        return self.store.get_rating(self.user_id)
