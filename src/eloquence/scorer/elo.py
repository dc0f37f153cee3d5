"""Elo rating system for public-speaking practice.

This module adapts the Elo rating system used in chess to single-player
practice sessions. There is no real opponent: each session is scored against
a fixed "par" rating that stands for average performance, and the 0-100
session score plays the role of the game result.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import TYPE_CHECKING

from ..models import RatingCategory, UserRating, round_half_up

if TYPE_CHECKING:
    from ..config import Config

logger = logging.getLogger(__name__)


class ELO:
    """Elo rating engine for practice sessions.

    The engine holds only its K-factor. Everything else is pure arithmetic:
    it never raises, and it does not track games played. Callers that want
    adaptive step sizes call set_k_factor() before updating.

    Example:
        ```python
        engine = ELO()

        # A 74/100 session for a 1200 player, scored against par 1200
        engine.update_rating(1200, 74, 1200)  # 1208
        engine.calculate_rating_change(1200, 74, 1200)  # 8

        # New players move faster
        engine.set_k_factor(games_played=3)
        engine.k  # 40
        ```
    """

    DEFAULT_RATING = 1200
    DEFAULT_K = 32

    def __init__(self, k: int = DEFAULT_K):
        """Initialize the engine.

        Args:
            k: K-factor determining rating volatility (default 32).
        """
        self.k = k

    @staticmethod
    def expected_score(rating_a: float, rating_b: float) -> float:
        """Calculate expected score for player A against player B.

        Args:
            rating_a: Elo rating of player A.
            rating_b: Elo rating of player B.

        Returns:
            Expected score strictly between 0 and 1.

        Example:
            ```python
            ELO.expected_score(1200, 1200)  # 0.5
            ELO.expected_score(1400, 1200)  # ~0.76
            ```
        """
        return 1 / (1 + 10 ** ((rating_b - rating_a) / 400))

    @staticmethod
    def win_probability(rating_a: float, rating_b: float) -> float:
        """Probability that A outperforms B. Same as expected_score()."""
        return ELO.expected_score(rating_a, rating_b)

    @staticmethod
    def _normalize(actual_score: float) -> float:
        # 0-100 session score -> 0-1 game result
        return min(max(actual_score / 100, 0.0), 1.0)

    def update_rating(
        self,
        current_rating: int | float,
        actual_score: float,
        opponent_rating: int | float,
    ) -> int:
        """Apply one session's score to a rating.

        Args:
            current_rating: The player's rating before the session.
            actual_score: Session score on a 0-100 scale. Values outside the
                range are clamped.
            opponent_rating: The baseline the session is scored against.

        Returns:
            The new rating, rounded half-up.
        """
        expected = self.expected_score(current_rating, opponent_rating)
        actual = self._normalize(actual_score)
        return round_half_up(current_rating + self.k * (actual - expected))

    def calculate_rating_change(
        self,
        current_rating: int | float,
        actual_score: float,
        opponent_rating: int | float,
    ) -> int:
        """Calculate the rating delta without applying it.

        For an integer current_rating this always equals
        ``update_rating(...) - current_rating``.
        """
        expected = self.expected_score(current_rating, opponent_rating)
        actual = self._normalize(actual_score)
        return round_half_up(self.k * (actual - expected))

    @staticmethod
    def k_for_games(games_played: int) -> int:
        """K-factor for a player with the given number of finished sessions."""
        if games_played < 30:
            return 40
        elif games_played < 100:
            return 32
        else:
            return 24

    def set_k_factor(self, games_played: int) -> None:
        """Adjust K to the player's experience.

        New players (< 30 sessions) swing more, experienced players
        (>= 100 sessions) stabilize.
        """
        self.k = self.k_for_games(games_played)

    @staticmethod
    def rating_category(rating: float) -> RatingCategory:
        """Map a rating to its named tier."""
        return RatingCategory.from_rating(rating)


class RatingStore:
    """Keeps one UserRating per user and applies session results to them.

    The store is the only place ratings change: record_session() runs the
    engine once per finalized session and commits the result.

    Example:
        ```python
        store = RatingStore(par_rating=1200)
        new_rating, delta = store.record_session("alice", combined_score=74)
        store.get_rating("alice")  # 1210 (K=40 for a new player)
        ```
    """

    def __init__(
        self,
        engine: ELO | None = None,
        initial_rating: int = ELO.DEFAULT_RATING,
        par_rating: int = ELO.DEFAULT_RATING,
        adaptive_k: bool = True,
    ):
        """Initialize the rating store.

        Args:
            engine: Engine to apply updates with (defaults to ELO()).
            initial_rating: Rating given to users on first sight.
            par_rating: Baseline every session is scored against.
            adaptive_k: Call engine.set_k_factor() before each update.
        """
        self.engine = engine or ELO()
        self.initial_rating = initial_rating
        self.par_rating = par_rating
        self.adaptive_k = adaptive_k
        self._ratings: dict[str, UserRating] = {}

    @classmethod
    def from_config(cls, config: Config) -> RatingStore:
        """Build a store from a Config."""
        return cls(
            engine=ELO(k=config.k_factor),
            initial_rating=config.initial_rating,
            par_rating=config.par_rating,
            adaptive_k=config.adaptive_k_factor,
        )

    @property
    def users(self) -> list[str]:
        return list(self._ratings)

    def has_user(self, user_id: str) -> bool:
        return user_id in self._ratings

    def get(self, user_id: str) -> UserRating:
        """Get a user's rating record, creating it on first use."""
        if user_id not in self._ratings:
            self._ratings[user_id] = UserRating(
                user_id=user_id,
                current_rating=self.initial_rating,
                previous_rating=self.initial_rating,
            )
        return self._ratings[user_id]

    def get_rating(self, user_id: str) -> int:
        return self.get(user_id).current_rating

    def record_session(
        self,
        user_id: str,
        combined_score: int,
        *,
        when: datetime | None = None,
    ) -> tuple[int, int]:
        """Apply a finalized session's score to the user's rating.

        Args:
            user_id: The user who practiced.
            combined_score: The session's 0-100 combined score.
            when: Completion time, used for last_updated and the streak
                (defaults to now).

        Returns:
            Tuple of (new_rating, rating_delta).
        """
        rating = self.get(user_id)
        when = when or datetime.now()

        if self.adaptive_k:
            self.engine.set_k_factor(rating.total_sessions)

        old = rating.current_rating
        new = self.engine.update_rating(old, combined_score, self.par_rating)

        rating.previous_rating = old
        rating.current_rating = new
        rating.last_updated = int(when.timestamp() * 1000)
        rating.average_score = (
            rating.average_score * rating.total_sessions + combined_score
        ) / (rating.total_sessions + 1)
        rating.total_sessions += 1
        rating.best_score = max(rating.best_score, combined_score)
        self._update_progression(rating, when.date())

        logger.info(
            f"Rating for '{user_id}': {old} -> {new} "
            f"(score={combined_score}, k={self.engine.k}, par={self.par_rating})"
        )
        return new, new - old

    @staticmethod
    def _update_progression(rating: UserRating, today: date) -> None:
        """+10 XP per session; streak counts consecutive practice days."""
        rating.xp += 10
        last = rating.last_session_date
        if last == today:
            return
        if last is not None and (today - last).days > 1:
            rating.streak = 1
        else:
            rating.streak += 1
        rating.last_session_date = today

    def get_rankings(self) -> list[tuple[str, int]]:
        """Get all users ranked by rating.

        Returns:
            List of (user_id, rating) tuples, sorted by rating descending.
        """
        return sorted(
            ((uid, r.current_rating) for uid, r in self._ratings.items()),
            key=lambda x: x[1],
            reverse=True,
        )
