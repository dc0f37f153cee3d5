"""Scoring module for Eloquence.

This module provides score combination and the Elo rating system that
turns session scores into a persistent skill rating.

Components:
    - Scorer: Combines per-modality feedback into a session score
    - ELO: Elo rating engine (expected score, update, K-factor, tiers)
    - RatingStore: Per-user ratings, updated once per finalized session

Example:
    ```python
    from eloquence.scorer import ELO, RatingStore, Scorer

    combined = Scorer.combine_scores(80, 60)  # 74
    new_rating = ELO().update_rating(1200, combined, 1200)
    ```
"""

from .elo import ELO, RatingStore
from .metrics import Scorer

__all__ = [
    "Scorer",
    "ELO",
    "RatingStore",
]
