"""
Pronunciation Scorer
Compares a speech-recognition transcript against the target phrase
"""

import logging
import math
import re
from typing import List, Sequence, Tuple

logger = logging.getLogger(__name__)

MODE_POSITIONAL = "positional"
MODE_OVERLAP = "overlap"

# keeps ASCII word characters and whitespace, like the browser client
_NON_WORD = re.compile(r"[^A-Za-z0-9_\s]")

# (minimum accuracy, message), checked top-down
_POSITIONAL_BANDS = [
    (100, "Perfect pronunciation!"),
    (80, "Great job! Minor improvements needed."),
    (60, "Good effort! Focus on problem sounds."),
    (0, "Keep practicing! Try speaking more slowly."),
]

_OVERLAP_BANDS = [
    (90, "Excellent!"),
    (70, "Good job!"),
    (0, "Needs more practice"),
]


def normalize_words(text: str) -> List[str]:
    """Lower-case, strip punctuation, split on whitespace."""
    return _NON_WORD.sub("", text.lower()).split()


def count_matches(target_words: Sequence[str], spoken_words: Sequence[str], mode: str) -> int:
    """
    positional: the spoken word at the same index must be equal.
    overlap: the target word may appear anywhere in the transcript.
    """
    if mode == MODE_POSITIONAL:
        return sum(
            1
            for i, word in enumerate(target_words)
            if i < len(spoken_words) and spoken_words[i] == word
        )
    if mode == MODE_OVERLAP:
        spoken = set(spoken_words)
        return sum(1 for word in target_words if word in spoken)
    raise ValueError(f"unknown scoring mode: {mode}")


def feedback_for(accuracy: int, mode: str, tips: Sequence[str] = ()) -> List[str]:
    bands = _POSITIONAL_BANDS if mode == MODE_POSITIONAL else _OVERLAP_BANDS
    messages = [next(msg for floor, msg in bands if accuracy >= floor)]
    # only the pronunciation lab shows exercise tips
    if mode == MODE_POSITIONAL and accuracy < 100 and tips:
        messages.extend(tips[:2])
    return messages


def score_transcript(
    target: str,
    transcript: str,
    mode: str = MODE_POSITIONAL,
    tips: Sequence[str] = (),
) -> Tuple[int, int, int, List[str]]:
    """
    Score a spoken transcript against the target phrase.

    Returns:
        Tuple of (accuracy, matched_words, total_words, feedback)
        - accuracy: int, 0-100 (an empty target scores 0)
        - feedback: list of messages; in positional mode up to two exercise
          tips are appended when accuracy is below 100
    """
    target_words = normalize_words(target)
    spoken_words = normalize_words(transcript)

    matches = count_matches(target_words, spoken_words, mode)
    total = len(target_words)
    # half-up, like the browser client
    accuracy = math.floor(matches / total * 100 + 0.5) if total else 0

    feedback = feedback_for(accuracy, mode, tips)
    logger.debug(f"Scored transcript: mode={mode}, matches={matches}/{total}, accuracy={accuracy}")
    return accuracy, matches, total, feedback
