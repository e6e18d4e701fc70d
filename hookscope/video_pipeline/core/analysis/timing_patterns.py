"""Frame-to-frame change detection over the ordered per-frame analyses."""

from typing import Iterable, List

from hookscope.video_pipeline.core.analysis.models import (
    ChangeType,
    FrameAnalysis,
    Significance,
    TimingPattern,
)

SCENE_OBJECT_THRESHOLD = 2
MAJOR_OBJECT_THRESHOLD = 3
SCENE_COLOR_THRESHOLD = 2
PACE_ACTION_THRESHOLD = 2


def count_new(previous: Iterable[str], current: Iterable[str]) -> int:
    """Entries of current absent from previous, compared exactly like the composition strings."""
    seen = set(previous)
    return sum(1 for item in current if item not in seen)


def compare_frames(previous: FrameAnalysis, current: FrameAnalysis) -> List[TimingPattern]:
    """Zero, one or two patterns for one consecutive pair."""
    patterns = []
    time_range = (previous.timestamp_seconds, current.timestamp_seconds)

    objects_changed = count_new(previous.objects, current.objects)
    colors_changed = count_new(previous.colors, current.colors)
    composition_changed = previous.composition != current.composition

    if objects_changed > SCENE_OBJECT_THRESHOLD or composition_changed or colors_changed > SCENE_COLOR_THRESHOLD:
        if objects_changed > MAJOR_OBJECT_THRESHOLD:
            significance = Significance.MAJOR
        elif composition_changed:
            significance = Significance.MODERATE
        else:
            significance = Significance.MINOR

        changes = []
        if objects_changed:
            changes.append(f"{objects_changed} new objects")
        if composition_changed:
            changes.append(f"composition {previous.composition or '?'} -> {current.composition or '?'}")
        if colors_changed:
            changes.append(f"{colors_changed} new colors")
        patterns.append(
            TimingPattern(
                time_range=time_range,
                change_type=ChangeType.SCENE,
                significance=significance,
                description="Scene change: " + ", ".join(changes),
                impact="Visual reset that re-captures attention" if significance is Significance.MAJOR else None,
            )
        )

    action_delta = len(current.actions) - len(previous.actions)
    if abs(action_delta) > PACE_ACTION_THRESHOLD:
        direction = "speeds up" if action_delta > 0 else "slows down"
        patterns.append(
            TimingPattern(
                time_range=time_range,
                change_type=ChangeType.PACE,
                significance=Significance.MODERATE,
                description=f"Pace {direction}: {len(previous.actions)} -> {len(current.actions)} actions",
            )
        )
    return patterns


def analyze_timing_patterns(frames: List[FrameAnalysis]) -> List[TimingPattern]:
    """
    Scan consecutive pairs in ascending timestamp order, each pair exactly once.

    Args:
        frames: Per-frame analyses, ascending by timestamp

    Returns:
        List[TimingPattern]: In scan order
    """
    patterns: List[TimingPattern] = []
    for previous, current in zip(frames, frames[1:]):
        patterns.extend(compare_frames(previous, current))
    return patterns
