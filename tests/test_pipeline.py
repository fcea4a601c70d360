"""End-to-end tests for analyze_video with a fake toolchain."""

from __future__ import annotations

import json
import time

import pytest
from conftest import FakeAdapter, alternating_frames, scene_log, silence_log

from deadair.analysis.module import analyze_video, default_metadata_path
from deadair.errors import PreconditionError, ToolExecutionError, ToolNotFoundError
from deadair.models.config import AnalyzeConfig
from deadair.models.segments import Recommendation
from deadair.trimming.trim import load_analysis


def _busy_adapter(**kwargs) -> FakeAdapter:
    """100s of high visual activity with one long silence at 40-50s."""
    kwargs.setdefault("duration", 100.0)
    kwargs.setdefault("silence_log", silence_log((40.0, 50.0)))
    kwargs.setdefault("frame_size", alternating_frames)
    return FakeAdapter(**kwargs)


@pytest.mark.parametrize("concurrent", [True, False])
def test_long_silence_becomes_suggestion(video, concurrent):
    analysis = analyze_video(
        video, config=AnalyzeConfig(concurrent=concurrent), adapter=_busy_adapter()
    )

    [silence] = analysis.silences
    assert silence.keep_pause is False
    assert silence.reason == "Long pause (10.0s) - recommend removal"

    [suggestion] = analysis.suggestions
    assert (suggestion.start_sec, suggestion.end_sec) == (40.5, 49.5)
    assert suggestion.confidence == pytest.approx(0.9)

    [activity] = analysis.frame_diffs
    assert activity.recommendation == Recommendation.KEEP
    assert (activity.start_sec, activity.end_sec) == (0.0, 100.0)


def test_sidecar_written_in_camel_case(video):
    analyze_video(video, adapter=_busy_adapter())

    sidecar = video.parent / "analysis.json"
    data = json.loads(sidecar.read_text())
    assert data["videoPath"] == str(video)
    assert data["duration"] == 100.0
    assert data["silences"][0]["durationSec"] == 10.0
    assert data["suggestions"][0]["type"] == "remove_pause"
    assert "frameDiffs" in data

    reloaded = load_analysis(sidecar)
    assert reloaded.suggestions[0].start_sec == 40.5


def test_output_dir_and_keyframes(video, tmp_path):
    out_dir = tmp_path / "out"
    adapter = _busy_adapter(scene_log=scene_log((3.0, 0.7)), scene_files=1)

    analysis = analyze_video(video, output_dir=out_dir, adapter=adapter)

    assert (out_dir / "analysis.json").exists()
    assert analysis.keyframes[0].thumbnail_path == str(out_dir / "keyframes" / "keyframe-001.png")


def test_metadata_wait_keeps_pause(video):
    default_metadata_path(video).write_text(json.dumps({
        "demoId": "checkout",
        "actions": [
            {"action": "wait", "args": "10000", "startMs": 40_000, "endMs": 50_000, "success": True},
            {"action": "click", "selector": "#buy", "startMs": 2_000, "endMs": 3_500, "success": True},
        ],
    }))
    adapter = _busy_adapter(scene_log=scene_log((3.0, 0.7)), scene_files=1)

    analysis = analyze_video(video, adapter=adapter)

    assert analysis.silences[0].keep_pause is True
    assert analysis.suggestions == []
    assert len(analysis.actions) == 2
    assert analysis.keyframes[0].associated_action.selector == "#buy"


def test_unreadable_metadata_degrades_to_duration_rules(video):
    default_metadata_path(video).write_text("{broken")

    analysis = analyze_video(video, adapter=_busy_adapter())

    assert analysis.actions is None
    assert analysis.silences[0].keep_pause is False


def test_explicit_metadata_path(video, tmp_path):
    meta = tmp_path / "elsewhere.json"
    meta.write_text(json.dumps({"actions": [
        {"action": "waitForText", "startMs": 41_000, "endMs": 42_000, "success": True},
    ]}))

    analysis = analyze_video(video, metadata_path=meta, adapter=_busy_adapter())

    assert analysis.silences[0].reason == "During waitForText"


def test_static_video_prefers_frame_suggestion(video):
    adapter = _busy_adapter(frame_size=lambda t: 1000)

    analysis = analyze_video(video, adapter=adapter)

    [suggestion] = analysis.suggestions
    assert (suggestion.start_sec, suggestion.end_sec) == (0.0, 100.0)
    assert suggestion.confidence == 0.9
    assert suggestion.reason.startswith("Static/no visual change")


def test_config_passed_to_detectors(video):
    adapter = _busy_adapter()
    config = AnalyzeConfig(silence_threshold_db=-40, min_silence_duration=1.5, scene_threshold=0.5)

    analyze_video(video, config=config, adapter=adapter)

    assert adapter.called("detect_silence") == [("detect_silence", -40, 1.5)]
    assert adapter.called("detect_scenes") == [("detect_scenes", 0.5)]


def test_unknown_duration_aborts(video):
    adapter = FakeAdapter(duration=0.0)

    with pytest.raises(PreconditionError, match="duration"):
        analyze_video(video, adapter=adapter)

    assert not (video.parent / "analysis.json").exists()
    assert adapter.called("detect_silence") == []


def test_missing_video(tmp_path):
    with pytest.raises(PreconditionError):
        analyze_video(tmp_path / "nope.mp4", adapter=FakeAdapter())


@pytest.mark.parametrize("concurrent", [True, False])
def test_silence_failure_leaves_no_sidecar(video, concurrent):
    adapter = _busy_adapter(silence_error=ToolExecutionError(["ffmpeg"], 1, "moov atom not found"))

    with pytest.raises(ToolExecutionError, match="moov atom"):
        analyze_video(video, config=AnalyzeConfig(concurrent=concurrent), adapter=adapter)

    assert not (video.parent / "analysis.json").exists()


def test_missing_tool_propagates(video):
    adapter = _busy_adapter(silence_error=ToolNotFoundError("ffmpeg"))

    with pytest.raises(ToolNotFoundError, match="brew install ffmpeg"):
        analyze_video(video, adapter=adapter)


def test_rerun_overwrites_sidecar(video):
    analyze_video(video, adapter=_busy_adapter())
    analyze_video(video, adapter=_busy_adapter(silence_log=""))

    data = json.loads((video.parent / "analysis.json").read_text())
    assert data["silences"] == []
    assert data["suggestions"] == []


def test_early_failure_does_not_wait_for_frame_scoring(video):
    adapter = FakeAdapter(
        duration=40.0,
        frame_delay=0.05,
        silence_error=ToolExecutionError(["ffmpeg"], 1, "Invalid data found"),
    )

    started = time.monotonic()
    with pytest.raises(ToolExecutionError):
        analyze_video(video, adapter=adapter)
    elapsed = time.monotonic() - started

    assert elapsed < 1.0
    assert len(adapter.called("extract_frame")) < 20
    assert not (video.parent / "analysis.json").exists()


def test_rerun_replaces_keyframes(video):
    first = _busy_adapter(scene_log=scene_log((3.0, 0.7), (8.0, 0.9)), scene_files=2)
    analyze_video(video, adapter=first)
    second = _busy_adapter(scene_log=scene_log((5.0, 0.6)), scene_files=1)

    analysis = analyze_video(video, adapter=second)

    keyframe_dir = video.parent / "keyframes"
    assert sorted(p.name for p in keyframe_dir.iterdir()) == ["keyframe-001.png"]
    assert analysis.keyframes[0].thumbnail_path == str(keyframe_dir / "keyframe-001.png")
    assert not list(video.parent.glob(".keyframes-*"))


def test_failed_rerun_keeps_previous_keyframes(video):
    analyze_video(video, adapter=_busy_adapter(scene_log=scene_log((3.0, 0.7)), scene_files=1))
    keyframe_dir = video.parent / "keyframes"
    failing = _busy_adapter(
        scene_log=scene_log((3.0, 0.7), (8.0, 0.9)),
        scene_files=2,
        frame_error=ToolNotFoundError("ffmpeg"),
    )

    with pytest.raises(ToolNotFoundError):
        analyze_video(video, config=AnalyzeConfig(concurrent=False), adapter=failing)

    assert sorted(p.name for p in keyframe_dir.iterdir()) == ["keyframe-001.png"]
    data = json.loads((video.parent / "analysis.json").read_text())
    assert data["keyframes"][0]["thumbnailPath"] == str(keyframe_dir / "keyframe-001.png")
    assert not list(video.parent.glob(".keyframes-*"))
