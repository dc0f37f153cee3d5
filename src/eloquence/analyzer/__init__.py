"""Analyzer module.

Analyzers produce the feedback a practice session accumulates:
- SpeechAnalyzer: OpenAI transcription and tone, plus transcript heuristics
- MockSpeechAnalyzer: Fixed transcript and tone, no API calls
- MockVisualAnalyzer: Seedable synthetic visual feedback
- FeedbackGenerator: Claude-written coaching notes for speech feedback
"""

from .base import BaseSpeechAnalyzer, BaseVisualAnalyzer
from .feedback import FeedbackGenerator, default_notes
from .heuristics import (
    analyze_pacing,
    calculate_clarity,
    detect_filler_words,
    overall_speech_score,
    words_per_minute,
)
from .speech import MockSpeechAnalyzer, SpeechAnalyzer, parse_tone
from .visual import MockVisualAnalyzer

__all__ = [
    "BaseSpeechAnalyzer",
    "BaseVisualAnalyzer",
    "SpeechAnalyzer",
    "MockSpeechAnalyzer",
    "MockVisualAnalyzer",
    "FeedbackGenerator",
    "default_notes",
    "parse_tone",
    "analyze_pacing",
    "calculate_clarity",
    "detect_filler_words",
    "overall_speech_score",
    "words_per_minute",
]
