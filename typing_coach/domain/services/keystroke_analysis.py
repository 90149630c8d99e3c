"""Keystroke log analysis: streaks, bursts, hesitations, finger usage and heatmap."""

import statistics
from dataclasses import dataclass
from typing import Optional, Sequence

from ..entities.session_summary import FingerUsageStat, HesitationStat, KeyStat
from ..entities.typing_event import KeyAction, TypingEvent
from .metrics import CHARACTERS_PER_WORD, MS_PER_MINUTE, round_half_up

DEFAULT_HESITATION_THRESHOLD_MS = 800
DEFAULT_BURST_WINDOW = 5

# Standard QWERTY touch-typing assignment: key -> (hand, finger)
FINGER_MAP: dict[str, tuple[str, str]] = {
    **{key: ("left", "pinky") for key in "`1qaz"},
    **{key: ("left", "ring") for key in "2wsx"},
    **{key: ("left", "middle") for key in "3edc"},
    **{key: ("left", "index") for key in "45rtfgvb"},
    **{key: ("right", "index") for key in "67yuhjnm"},
    **{key: ("right", "middle") for key in "8ik,"},
    **{key: ("right", "ring") for key in "9ol."},
    **{key: ("right", "pinky") for key in "0-=p[]\\;'/\n"},
    "\t": ("left", "pinky"),
    " ": ("right", "thumb"),
}

SHIFTED_KEYS = {
    "~": "`", "!": "1", "@": "2", "#": "3", "$": "4", "%": "5", "^": "6",
    "&": "7", "*": "8", "(": "9", ")": "0", "_": "-", "+": "=", "{": "[",
    "}": "]", "|": "\\", ":": ";", '"': "'", "<": ",", ">": ".", "?": "/",
}

_FINGER_ORDER = ("pinky", "ring", "middle", "index", "thumb")


@dataclass
class KeystrokeAnalysis:
    """Optional summary fields derived from a session's event log."""

    streak: int
    burst_speed: Optional[int]
    hesitation_stats: Optional[HesitationStat]
    finger_usage: Optional[list[FingerUsageStat]]
    heatmap: Optional[dict[str, KeyStat]]


def base_key(character: str) -> str:
    """Unshifted, lower-case key that produces a character."""
    lowered = character.lower()
    return SHIFTED_KEYS.get(lowered, lowered)


def finger_for(character: str) -> Optional[tuple[str, str]]:
    return FINGER_MAP.get(base_key(character))


def compared_keystrokes(events: Sequence[TypingEvent]) -> list[TypingEvent]:
    """Key presses that were matched against the target text."""
    return [
        event for event in events
        if event.action == KeyAction.KEYDOWN and event.is_correct is not None
    ]


def longest_streak(events: Sequence[TypingEvent]) -> int:
    best = current = 0
    for event in compared_keystrokes(events):
        if event.is_correct:
            current += 1
            best = max(best, current)
        else:
            current = 0
    return best


def burst_speed(events: Sequence[TypingEvent], window: int = DEFAULT_BURST_WINDOW) -> Optional[int]:
    """Peak WPM over any ``window`` consecutive correct keystrokes.

    Returns None when no run of correct keystrokes is long enough.
    """
    if window < 1:
        raise ValueError("Burst window must be at least 1")

    best: Optional[int] = None
    run: list[int] = []
    for event in compared_keystrokes(events):
        if not event.is_correct or event.latency_ms is None:
            run = []
            continue
        run.append(event.latency_ms)
        if len(run) < window:
            continue
        duration_ms = sum(run[-window:])
        if duration_ms <= 0:
            continue
        wpm = round_half_up((window / CHARACTERS_PER_WORD) / (duration_ms / MS_PER_MINUTE))
        best = wpm if best is None else max(best, wpm)
    return best


def hesitation_stats(
    events: Sequence[TypingEvent],
    threshold_ms: int = DEFAULT_HESITATION_THRESHOLD_MS,
) -> Optional[HesitationStat]:
    latencies = [event.latency_ms for event in compared_keystrokes(events) if event.latency_ms is not None]
    if not latencies:
        return None
    return HesitationStat(
        average_ms=round_half_up(statistics.mean(latencies)),
        longest_ms=max(latencies),
        occurrences=sum(1 for latency in latencies if latency > threshold_ms),
    )


def _expected_characters(events: Sequence[TypingEvent], target_text: str):
    for event in compared_keystrokes(events):
        index = event.cursor_index
        if index is None or index >= len(target_text):
            continue
        yield target_text[index], bool(event.is_correct)


def finger_usage(events: Sequence[TypingEvent], target_text: str) -> Optional[list[FingerUsageStat]]:
    """Presses and errors per finger, attributed to the expected character."""
    counts: dict[tuple[str, str], list[int]] = {}
    for expected, is_correct in _expected_characters(events, target_text):
        assignment = finger_for(expected)
        if assignment is None:
            continue
        tally = counts.setdefault(assignment, [0, 0])
        tally[0] += 1
        if not is_correct:
            tally[1] += 1

    if not counts:
        return None

    ordered = sorted(counts.items(), key=lambda item: (item[0][0], _FINGER_ORDER.index(item[0][1])))
    return [
        FingerUsageStat(hand=hand, finger=finger, presses=presses, errors=errors)
        for (hand, finger), (presses, errors) in ordered
    ]


def key_heatmap(events: Sequence[TypingEvent], target_text: str) -> Optional[dict[str, KeyStat]]:
    """Presses and errors per expected key."""
    counts: dict[str, list[int]] = {}
    for expected, is_correct in _expected_characters(events, target_text):
        tally = counts.setdefault(base_key(expected), [0, 0])
        tally[0] += 1
        if not is_correct:
            tally[1] += 1

    if not counts:
        return None
    return {key: KeyStat(presses=presses, errors=errors) for key, (presses, errors) in counts.items()}


def analyze_keystrokes(
    events: Sequence[TypingEvent],
    target_text: str,
    hesitation_threshold_ms: int = DEFAULT_HESITATION_THRESHOLD_MS,
    burst_window: int = DEFAULT_BURST_WINDOW,
) -> KeystrokeAnalysis:
    return KeystrokeAnalysis(
        streak=longest_streak(events),
        burst_speed=burst_speed(events, burst_window),
        hesitation_stats=hesitation_stats(events, hesitation_threshold_ms),
        finger_usage=finger_usage(events, target_text),
        heatmap=key_heatmap(events, target_text),
    )
