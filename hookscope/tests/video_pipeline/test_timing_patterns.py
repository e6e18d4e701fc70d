from hookscope.video_pipeline.core.analysis.models import ChangeType, FrameAnalysis, Significance
from hookscope.video_pipeline.core.analysis.timing_patterns import analyze_timing_patterns, count_new


def frame(t, objects=(), colors=("red",), composition="close-up", actions=()):
    return FrameAnalysis(
        timestamp_seconds=t,
        description=f"frame {t}",
        objects=list(objects),
        colors=list(colors),
        composition=composition,
        actions=list(actions),
    )


def test_four_new_objects_is_one_major_scene_change():
    patterns = analyze_timing_patterns([
        frame(0, objects=["a"]),
        frame(2, objects=["a", "b", "c", "d", "e"]),
    ])

    assert len(patterns) == 1
    assert patterns[0].change_type is ChangeType.SCENE
    assert patterns[0].significance is Significance.MAJOR
    assert patterns[0].time_range == (0, 2)


def test_composition_change_is_moderate():
    patterns = analyze_timing_patterns([frame(0), frame(2, composition="wide shot")])

    assert [(p.change_type, p.significance) for p in patterns] == [(ChangeType.SCENE, Significance.MODERATE)]


def test_color_change_alone_is_minor():
    patterns = analyze_timing_patterns([
        frame(0, colors=["red"]),
        frame(2, colors=["blue", "green", "yellow"]),
    ])

    assert [(p.change_type, p.significance) for p in patterns] == [(ChangeType.SCENE, Significance.MINOR)]


def test_pace_change_is_independent_of_scene_change():
    patterns = analyze_timing_patterns([
        frame(0, actions=["walk"]),
        frame(2, composition="wide shot", actions=["run", "jump", "spin", "wave", "fall"]),
    ])

    assert [p.change_type for p in patterns] == [ChangeType.SCENE, ChangeType.PACE]
    assert patterns[1].significance is Significance.MODERATE


def test_small_changes_emit_nothing():
    patterns = analyze_timing_patterns([
        frame(0, objects=["a"], actions=["walk"]),
        frame(2, objects=["a", "b", "c"], actions=["walk", "talk", "wave"]),
    ])

    assert patterns == []


def test_pairs_scanned_in_order_once():
    frames = [frame(t, composition=f"shot{t}") for t in (0, 2, 4, 6)]

    patterns = analyze_timing_patterns(frames)

    assert [p.time_range for p in patterns] == [(0, 2), (2, 4), (4, 6)]


def test_fewer_than_two_frames():
    assert analyze_timing_patterns([]) == []
    assert analyze_timing_patterns([frame(0)]) == []


def test_count_new_compares_entries_exactly():
    assert count_new(["red", "blue"], ["Red", "blue", "green"]) == 2
    assert count_new(["a"], ["b", "b", "a"]) == 2
    assert count_new([], []) == 0


def test_differently_cased_colors_are_new_colors():
    patterns = analyze_timing_patterns([
        frame(0, colors=["red", "blue", "green"]),
        frame(2, colors=["Red", "Blue", "Green"]),
    ])

    assert [(p.change_type, p.significance) for p in patterns] == [(ChangeType.SCENE, Significance.MINOR)]
