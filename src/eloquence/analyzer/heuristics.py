"""Transcript heuristics for speech scoring.

Pure functions that score a transcript without any API calls. The LLM
analyzers only add tone on top of these.
"""

from __future__ import annotations

import json
import re
from typing import Any

from ..models import Clarity, FillerWords, Pace, Tone, round_half_up

FILLER_PATTERNS = [
    re.compile(r"\b(um|uh|er|ah|hmm|huh)\b", re.IGNORECASE),
    re.compile(r"\b(like|you know|i mean|basically|actually|literally)\b", re.IGNORECASE),
    re.compile(r"\b(so|well|right|okay|yeah)\b", re.IGNORECASE),
]

PAUSE_PATTERN = re.compile(r"[.,…]")
SENTENCE_SPLIT = re.compile(r"[.!?]+")

# Weights of the speech sub-scores in the overall score
SPEECH_WEIGHTS = {
    "tone": 0.25,
    "pace": 0.20,
    "filler_words": 0.20,
    "clarity": 0.35,
}


def words_per_minute(word_count: int, duration: float | None) -> int:
    """Speaking rate, or 0 when the duration is unknown or under a second."""
    if not duration or duration <= 1:
        return 0
    return round_half_up(word_count / duration * 60)


def detect_filler_words(transcript: str) -> FillerWords:
    """Count filler words. Each one costs 10 points off a perfect 100."""
    detected: list[str] = []
    for pattern in FILLER_PATTERNS:
        detected.extend(m.group(0) for m in pattern.finditer(transcript))

    return FillerWords(
        count=len(detected),
        words=list(dict.fromkeys(detected)),
        score=max(0, 100 - len(detected) * 10),
    )


def analyze_pacing(transcript: str, wpm: int) -> Pace:
    """Score pacing from speaking rate, pauses and sentence-length variance.

    - rate outside 120-200 wpm costs 20 points
    - fewer than 2 pauses costs 10, more than 10 costs 15
    - rhythm is "varied" above variance 10, "unpredictable" above 20
    """
    pauses = len(PAUSE_PATTERN.findall(transcript))

    sentences = [s for s in SENTENCE_SPLIT.split(transcript) if s.strip()]
    lengths = [len(s.split()) for s in sentences]
    if lengths:
        mean = sum(lengths) / len(lengths)
        variance = sum((n - mean) ** 2 for n in lengths) / len(lengths)
    else:
        variance = 0.0

    rhythm = "consistent"
    if variance > 10:
        rhythm = "varied"
    if variance > 20:
        rhythm = "unpredictable"

    score = 100
    if wpm < 120 or wpm > 200:
        score -= 20
    if pauses < 2:
        score -= 10
    elif pauses > 10:
        score -= 15

    return Pace(
        words_per_minute=wpm,
        pauses=pauses,
        score=max(0, score),
        rhythm=rhythm,
        consistency=max(0.0, 100 - variance * 2),
    )


def calculate_clarity(words: list[str]) -> Clarity:
    """Vocabulary-variety proxy for clarity: unique-word ratio plus 20."""
    vocabulary = len(set(words)) / len(words) * 100 if words else 0.0
    articulation = min(100.0, vocabulary + 20)
    return Clarity(articulation=articulation, overall=articulation)


def overall_speech_score(
    tone: Tone,
    pace: Pace,
    filler_words: FillerWords,
    clarity: Clarity,
) -> int:
    """Weighted speech score (tone .25, pace .20, fillers .20, clarity .35)."""
    return round_half_up(
        tone.score * SPEECH_WEIGHTS["tone"]
        + pace.score * SPEECH_WEIGHTS["pace"]
        + filler_words.score * SPEECH_WEIGHTS["filler_words"]
        + clarity.overall * SPEECH_WEIGHTS["clarity"]
    )


def parse_json_response(text: str) -> Any:
    """Parse JSON from an LLM reply, tolerating a markdown code fence.

    Raises:
        json.JSONDecodeError: If no valid JSON can be extracted.
    """
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        end_idx = len(lines)
        for i in range(1, len(lines)):
            if lines[i].strip() == "```":
                end_idx = i
                break
        text = "\n".join(lines[1:end_idx])
    return json.loads(text)
