"""Synthetic visual analysis.

There is no computer vision here. MockVisualAnalyzer generates plausible
eye-contact, expression, posture, gesture and body-language scores whose
level depends on a chosen speaker skill level. Pass a seed to get the
same sequence of feedback on every run.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass

from ..models import (
    BodyLanguage,
    EyeContact,
    FacialExpression,
    FeedbackNotes,
    Gestures,
    Posture,
    SkillLevel,
    VisualFeedback,
    round_half_up,
)
from .base import BaseVisualAnalyzer

GESTURES = [
    "open palms",
    "pointing",
    "counting on fingers",
    "steepled hands",
    "sweeping motion",
    "hand on heart",
    "emphatic chop",
]

# Weights of the visual sub-scores in the overall score
VISUAL_WEIGHTS = {
    "eye_contact": 0.25,
    "facial_expression": 0.20,
    "posture": 0.20,
    "gestures": 0.20,
    "body_language": 0.15,
}


@dataclass(frozen=True)
class LevelProfile:
    """Baseline (0-1) of each visual aspect for one skill level."""

    base: float
    stability: float
    eye_contact: float
    facial_expression: float
    posture: float
    gestures: float
    body_language: float


PROFILES = {
    SkillLevel.BEGINNER: LevelProfile(0.2, 0.1, 0.15, 0.2, 0.25, 0.1, 0.2),
    SkillLevel.INTERMEDIATE: LevelProfile(0.6, 0.6, 0.65, 0.6, 0.7, 0.55, 0.6),
    SkillLevel.ADVANCED: LevelProfile(0.9, 0.95, 0.9, 0.85, 0.95, 0.8, 0.9),
}

# Sub-scores below these get a suggestion, above the positive thresholds
# they get praise
SUGGESTION_THRESHOLDS = {
    SkillLevel.BEGINNER: 60,
    SkillLevel.INTERMEDIATE: 75,
    SkillLevel.ADVANCED: 85,
}
POSITIVE_THRESHOLDS = {
    SkillLevel.BEGINNER: 50,
    SkillLevel.INTERMEDIATE: 70,
    SkillLevel.ADVANCED: 85,
}

SUGGESTIONS = {
    SkillLevel.BEGINNER: {
        "eye_contact": "Practice maintaining eye contact with the audience",
        "posture": "Work on standing straight and maintaining good posture",
        "gestures": "Try using more hand gestures to emphasize key points",
        "facial_expression": "Practice showing more facial expressions",
        "body_language": "Focus on overall body coordination and movement",
    },
    SkillLevel.INTERMEDIATE: {
        "eye_contact": "Vary your eye contact across different audience members",
        "posture": "Fine-tune your posture for better audience engagement",
        "gestures": "Refine your gesture timing and variety",
        "facial_expression": "Enhance emotional expression through facial cues",
        "body_language": "Improve overall body language coordination",
    },
    SkillLevel.ADVANCED: {
        "eye_contact": "Master advanced eye contact techniques for larger audiences",
        "posture": "Perfect your posture for maximum impact",
        "gestures": "Develop signature gestures that enhance your message",
        "facial_expression": "Perfect micro-expressions for emotional impact",
        "body_language": "Achieve perfect body language synchronization",
    },
}

IMPROVEMENTS = {
    SkillLevel.BEGINNER: [
        "Focus on basic eye contact techniques",
        "Practice standing with confidence",
        "Learn fundamental hand gestures",
    ],
    SkillLevel.INTERMEDIATE: [
        "Develop more sophisticated eye contact patterns",
        "Enhance posture for better audience connection",
        "Master gesture timing and variety",
    ],
    SkillLevel.ADVANCED: [
        "Perfect advanced eye contact for large audiences",
        "Achieve master-level posture and presence",
        "Create signature gesture repertoire",
    ],
}

POSITIVES = {
    SkillLevel.BEGINNER: {
        "eye_contact": "Good effort with eye contact",
        "posture": "Maintained decent posture throughout",
        "gestures": "Used some effective hand gestures",
    },
    SkillLevel.INTERMEDIATE: {
        "eye_contact": "Excellent eye contact engagement",
        "posture": "Strong, confident posture",
        "gestures": "Well-timed and varied gestures",
        "facial_expression": "Expressive facial communication",
    },
    SkillLevel.ADVANCED: {
        "eye_contact": "Masterful eye contact control",
        "posture": "Perfect posture and presence",
        "gestures": "Exceptional gesture mastery",
        "facial_expression": "Sophisticated facial expression control",
        "body_language": "Outstanding body language coordination",
    },
}

MAX_NOTES = 3


def _clamp(value: float, upper: float = 1.0) -> float:
    return max(0.0, min(upper, value))


def build_notes(level: SkillLevel, scores: dict[str, float]) -> FeedbackNotes:
    """Level-appropriate notes for a set of visual sub-scores."""
    suggestion_bar = SUGGESTION_THRESHOLDS[level]
    positive_bar = POSITIVE_THRESHOLDS[level]

    suggestions = [
        text for aspect, text in SUGGESTIONS[level].items() if scores[aspect] < suggestion_bar
    ]
    positive = [
        text for aspect, text in POSITIVES[level].items() if scores[aspect] > positive_bar
    ]
    return FeedbackNotes(
        positive=positive[:MAX_NOTES],
        improvements=list(IMPROVEMENTS[level]),
        suggestions=suggestions[:MAX_NOTES],
    )


class MockVisualAnalyzer(BaseVisualAnalyzer):
    """Seedable generator of synthetic visual feedback.

    Scores cluster around the chosen skill level: beginners land roughly in
    the 20-40 range, intermediate speakers around 70, advanced near 90 and up.

    Example:
        ```python
        analyzer = MockVisualAnalyzer(skill_level="advanced", seed=7)
        feedback = await analyzer.analyze()
        aggregator.record_visual_feedback(feedback)
        ```
    """

    def __init__(
        self,
        skill_level: SkillLevel | str = SkillLevel.INTERMEDIATE,
        seed: int | None = None,
    ):
        """Initialize the generator.

        Args:
            skill_level: Speaker level the generated scores should reflect.
            seed: Random seed for reproducibility.
        """
        self.skill_level = SkillLevel(skill_level)
        self._random = random.Random(seed)

    def generate(self) -> VisualFeedback:
        """Generate one synthetic VisualFeedback."""
        rng = self._random.random
        profile = PROFILES[self.skill_level]

        stability = profile.stability + rng() * 0.15
        confidence = profile.base + rng() * 0.2

        eye_contact = _clamp(profile.eye_contact + rng() * 0.2) * 100
        eye_duration = _clamp(profile.eye_contact + rng() * 0.25)
        eye_percentage = _clamp(profile.eye_contact + rng() * 0.2) * 100

        facial = _clamp(profile.facial_expression + rng() * 0.2) * 100
        emotion_confidence = _clamp(confidence + rng() * 0.15)

        posture = _clamp(profile.posture + rng() * 0.15) * 100
        posture_stability = _clamp(stability + rng() * 0.1)

        gestures = _clamp(profile.gestures + rng() * 0.25) * 100
        gesture_confidence = _clamp(confidence + rng() * 0.2)

        body = _clamp(profile.body_language + rng() * 0.15) * 100
        overall_confidence = _clamp(confidence + rng() * 0.1)

        scores = {
            "eye_contact": eye_contact,
            "facial_expression": facial,
            "posture": posture,
            "gestures": gestures,
            "body_language": body,
        }
        overall = round_half_up(sum(scores[k] * w for k, w in VISUAL_WEIGHTS.items()))

        return VisualFeedback(
            timestamp=int(time.time() * 1000),
            eye_contact=EyeContact(
                percentage=eye_percentage, duration=eye_duration, score=eye_contact
            ),
            facial_expression=FacialExpression(
                emotion="confident", confidence=emotion_confidence, score=facial
            ),
            posture=Posture(
                stance="good" if posture_stability >= 0.5 else "rigid", score=posture
            ),
            gestures=Gestures(
                detected=self._random.sample(GESTURES, 3),
                appropriateness=gesture_confidence * 100,
                frequency=5,
                score=gestures,
            ),
            body_language=BodyLanguage(
                openness=overall_confidence * 100,
                energy=overall_confidence * 100,
                engagement=overall_confidence * 100,
                overall=body,
            ),
            notes=build_notes(self.skill_level, scores),
            overall_score=overall,
        )

    async def analyze(self, frame: bytes | None = None) -> VisualFeedback:
        """Ignore the frame and return synthetic feedback."""
        return self.generate()
