"""Eloquence - Elo-rated public speaking practice.

Collect speech and body-language feedback during a practice session,
combine it into one score, and track progress with an Elo rating.

Example:
    ```python
    from eloquence import RatingStore, SessionAggregator

    aggregator = SessionAggregator("alice", RatingStore())
    aggregator.start_session()
    aggregator.record_speech_feedback({"overallScore": 80})
    aggregator.record_visual_feedback({"overallScore": 60})
    outcome = aggregator.end_session()
    print(outcome.combined_score, outcome.new_rating)  # 74 1210
    ```
"""

from .analyzer import (
    BaseSpeechAnalyzer,
    BaseVisualAnalyzer,
    FeedbackGenerator,
    MockSpeechAnalyzer,
    MockVisualAnalyzer,
    SpeechAnalyzer,
)
from .coach import Coach
from .config import Config
from .exceptions import (
    AnalysisError,
    APIKeyError,
    ConfigError,
    EloquenceError,
    InvalidInputError,
    InvalidStateError,
    NoActiveSessionError,
    SessionAlreadyActiveError,
)
from .models import (
    FeedbackNotes,
    RatingCategory,
    SessionOutcome,
    SessionRecord,
    SkillLevel,
    SpeechFeedback,
    UserRating,
    VisualFeedback,
)
from .reporter import TextReporter, print_outcome
from .scorer import ELO, RatingStore, Scorer
from .session import SessionAggregator

__version__ = "0.1.0"

__all__ = [
    # Main entry points
    "Coach",
    "SessionAggregator",
    # Configuration
    "Config",
    # Models
    "SpeechFeedback",
    "VisualFeedback",
    "FeedbackNotes",
    "SessionRecord",
    "SessionOutcome",
    "UserRating",
    "RatingCategory",
    "SkillLevel",
    # Scorer
    "ELO",
    "RatingStore",
    "Scorer",
    # Analyzers
    "BaseSpeechAnalyzer",
    "BaseVisualAnalyzer",
    "SpeechAnalyzer",
    "MockSpeechAnalyzer",
    "MockVisualAnalyzer",
    "FeedbackGenerator",
    # Reporter
    "TextReporter",
    "print_outcome",
    # Exceptions
    "EloquenceError",
    "InvalidStateError",
    "SessionAlreadyActiveError",
    "NoActiveSessionError",
    "InvalidInputError",
    "ConfigError",
    "APIKeyError",
    "AnalysisError",
]
