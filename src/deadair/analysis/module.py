"""Analysis module — orchestrates all detection and synthesis steps."""

from __future__ import annotations

import shutil
import tempfile
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from pathlib import Path

from deadair.analysis.activity import analyze_frame_activity
from deadair.analysis.correlate import correlate_silences
from deadair.analysis.keyframes import associate_actions, extract_keyframes
from deadair.analysis.silence import detect_silences
from deadair.analysis.suggestions import synthesize_suggestions
from deadair.errors import PreconditionError
from deadair.media.adapter import MediaToolAdapter
from deadair.media.ffmpeg_adapter import FFmpegAdapter
from deadair.models.actions import ActionTiming, RecordingMetadata
from deadair.models.analysis import VideoAnalysis
from deadair.models.config import AnalyzeConfig
from deadair.models.segments import KeyframeInfo
from deadair.utils.io import read_json, write_json
from deadair.utils.progress import log, log_step, log_success, log_warning

ANALYSIS_FILENAME = "analysis.json"
KEYFRAME_DIRNAME = "keyframes"
STAGING_PREFIX = ".keyframes-"


def default_metadata_path(video_path: Path) -> Path:
    """``demo.webm`` -> ``demo.metadata.json``."""
    return video_path.with_suffix(".metadata.json")


def load_actions(metadata_path: Path) -> list[ActionTiming] | None:
    """Read the recorder's action log, or None if it is missing or unreadable."""
    if not metadata_path.exists():
        log("No metadata file found, analyzing without action timing", style="")
        return None
    try:
        metadata = RecordingMetadata(**read_json(metadata_path))
    except (OSError, ValueError, TypeError) as e:
        log_warning(f"Ignoring unreadable metadata {metadata_path.name}: {e}")
        return None
    log(f"Loaded {len(metadata.actions)} actions from metadata", style="")
    return metadata.actions


def analyze_video(
    video_path: Path | str,
    *,
    config: AnalyzeConfig | None = None,
    output_dir: Path | str | None = None,
    metadata_path: Path | str | None = None,
    adapter: MediaToolAdapter | None = None,
) -> VideoAnalysis:
    """Analyze a video for dead air and write ``analysis.json``.

    Steps:
    1. Probe duration (0 means unknown and aborts the run)
    2. Load the optional action log
    3. Silence, keyframe and frame-activity detection (concurrently)
    4. Correlate silences with actions
    5. Synthesize trim suggestions
    6. Write the sidecar, only after everything above succeeded

    Keyframes are rendered into a hidden staging directory and replace
    ``keyframes/`` only once the sidecar is written, so a failed run leaves
    the previous analysis and its thumbnails untouched.
    """
    config = config or AnalyzeConfig()
    video_path = Path(video_path)
    output_dir = Path(output_dir) if output_dir else video_path.parent
    adapter = adapter or FFmpegAdapter(timeout=config.tool_timeout_seconds)
    started = time.monotonic()

    if not video_path.exists():
        raise PreconditionError(f"Video file not found: {video_path}")

    log(f"Analyzing video: {video_path}")

    # Step 1: Duration
    duration = adapter.probe_duration(video_path)
    if duration <= 0:
        raise PreconditionError(
            f"Could not determine video duration: {video_path}. "
            "Check that the file is a playable video."
        )
    log_step("Probe", f"Video duration: {duration:.2f}s")

    # Step 2: Action log
    meta = Path(metadata_path) if metadata_path else default_metadata_path(video_path)
    actions = load_actions(meta)

    # Step 3: Independent detectors
    output_dir.mkdir(parents=True, exist_ok=True)
    silences, (keyframes, staging), frame_diffs = _run_detectors(
        adapter, video_path, output_dir, duration, config
    )
    keyframe_dir = output_dir / KEYFRAME_DIRNAME

    try:
        # Step 4: Correlation
        silences = correlate_silences(
            silences, actions, max_acceptable_pause=config.max_acceptable_pause
        )
        keyframes = _relocate(keyframes, keyframe_dir)
        if actions:
            keyframes = associate_actions(keyframes, actions)
        removable = sum(1 for s in silences if not s.keep_pause)
        log_step("Correlate", f"{removable} of {len(silences)} silences recommended for removal")

        # Step 5: Suggestions
        suggestions = synthesize_suggestions(
            frame_diffs, silences, min_pause_to_keep=config.min_pause_to_keep
        )

        analysis = VideoAnalysis(
            video_path=str(video_path),
            duration=duration,
            silences=silences,
            keyframes=keyframes,
            actions=actions,
            suggestions=suggestions,
            frame_diffs=frame_diffs,
            min_pause_to_keep=config.min_pause_to_keep,
        )

        # Step 6: Persist
        analysis_path = output_dir / ANALYSIS_FILENAME
        write_json(analysis_path, analysis.to_json_dict())
        _publish_keyframes(staging, keyframe_dir)
    finally:
        shutil.rmtree(staging, ignore_errors=True)

    log_success(
        f"Analysis saved to {analysis_path} "
        f"({time.monotonic() - started:.1f}s, {len(suggestions)} suggestions)"
    )
    return analysis


def _stage_keyframes(
    adapter: MediaToolAdapter,
    video_path: Path,
    output_dir: Path,
    duration: float,
    config: AnalyzeConfig,
) -> tuple[list[KeyframeInfo], Path]:
    staging = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=output_dir))
    try:
        keyframes = extract_keyframes(
            adapter, video_path, staging, duration, scene_threshold=config.scene_threshold
        )
    except BaseException:
        shutil.rmtree(staging, ignore_errors=True)
        raise
    return keyframes, staging


def _discard_staged(staged: tuple[list[KeyframeInfo], Path]) -> None:
    shutil.rmtree(staged[1], ignore_errors=True)


def _discard_when_done(future: Future) -> None:
    if not future.cancelled() and future.exception() is None:
        _discard_staged(future.result())


def _relocate(keyframes: list[KeyframeInfo], keyframe_dir: Path) -> list[KeyframeInfo]:
    """Point thumbnails at their published location."""
    return [
        k.model_copy(update={"thumbnail_path": str(keyframe_dir / Path(k.thumbnail_path).name)})
        for k in keyframes
    ]


def _publish_keyframes(staging: Path, keyframe_dir: Path) -> None:
    if keyframe_dir.exists():
        shutil.rmtree(keyframe_dir)
    staging.rename(keyframe_dir)


def _run_detectors(
    adapter: MediaToolAdapter,
    video_path: Path,
    output_dir: Path,
    duration: float,
    config: AnalyzeConfig,
) -> tuple[list, tuple[list[KeyframeInfo], Path], list]:
    """Run silence, keyframe and activity detection; the first failure aborts.

    On failure the activity scorer is told to stop, queued work is cancelled
    and the error is raised without waiting for detectors still running.
    Staged keyframes from an aborted run are removed.
    """
    stop = threading.Event()
    jobs = {
        "silence": lambda: detect_silences(
            adapter,
            video_path,
            threshold_db=config.silence_threshold_db,
            min_duration_sec=config.min_silence_duration,
        ),
        "keyframes": lambda: _stage_keyframes(adapter, video_path, output_dir, duration, config),
        "activity": lambda: analyze_frame_activity(
            adapter,
            video_path,
            duration,
            segment_duration=config.segment_duration,
            workers=config.frame_workers,
            stop=stop,
        ),
    }

    if not config.concurrent:
        results: dict = {}
        try:
            for name, job in jobs.items():
                results[name] = job()
        except BaseException:
            if "keyframes" in results:
                _discard_staged(results["keyframes"])
            raise
        return results["silence"], results["keyframes"], results["activity"]

    pool = ThreadPoolExecutor(max_workers=len(jobs), thread_name_prefix="deadair")
    futures = {name: pool.submit(job) for name, job in jobs.items()}
    done, _ = wait(futures.values(), return_when=FIRST_EXCEPTION)

    failed = next(
        (f for f in futures.values() if f in done and f.exception() is not None), None
    )
    if failed is not None:
        stop.set()
        futures["keyframes"].add_done_callback(_discard_when_done)
        pool.shutdown(wait=False, cancel_futures=True)
        raise failed.exception()

    pool.shutdown()
    return (
        futures["silence"].result(),
        futures["keyframes"].result(),
        futures["activity"].result(),
    )
