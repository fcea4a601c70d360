"""deadair analyze — find removable pauses in a video."""

from __future__ import annotations

from pathlib import Path

import click

from deadair.config import apply_overrides, load_config
from deadair.errors import DeadAirError
from deadair.utils.progress import format_seconds, log_error, show_summary


@click.command()
@click.argument("video", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "-c", "config_path", type=click.Path(), help="Path to deadair.yaml")
@click.option("--output-dir", "-o", type=click.Path(file_okay=False), help="Where analysis.json and keyframes/ go")
@click.option("--metadata", "-m", type=click.Path(), help="Recorder action log (default: <video>.metadata.json)")
@click.option("--silence-threshold", type=float, help="Silence level in dB (default -30)")
@click.option("--min-silence", type=float, help="Shortest silence to detect, seconds (default 0.5)")
@click.option("--max-pause", type=float, help="Longest pause kept without an action reason (default 3)")
@click.option("--scene-threshold", type=float, help="Scene change sensitivity 0-1 (default 0.3)")
@click.option("--workers", type=int, help="Parallel frame extractions (default 1)")
@click.option("--timeout", type=float, help="Per-command ffmpeg timeout in seconds")
def analyze_cmd(
    video: str,
    config_path: str | None,
    output_dir: str | None,
    metadata: str | None,
    silence_threshold: float | None,
    min_silence: float | None,
    max_pause: float | None,
    scene_threshold: float | None,
    workers: int | None,
    timeout: float | None,
) -> None:
    """Analyze VIDEO and write analysis.json next to it."""
    from deadair.analysis.module import analyze_video

    video_path = Path(video).resolve()
    try:
        settings = load_config(config_path, search_dir=video_path.parent)
        settings = apply_overrides(
            settings,
            "analyze",
            silence_threshold_db=silence_threshold,
            min_silence_duration=min_silence,
            max_acceptable_pause=max_pause,
            scene_threshold=scene_threshold,
            frame_workers=workers,
            tool_timeout_seconds=timeout,
        )
        analysis = analyze_video(
            video_path,
            config=settings.analyze,
            output_dir=output_dir,
            metadata_path=metadata,
        )
    except (DeadAirError, ValueError) as e:
        log_error(f"Analysis failed: {e}")
        raise SystemExit(1)

    removable = sum(s.duration for s in analysis.remove_suggestions)
    show_summary("Analysis", {
        "Video": video_path.name,
        "Duration": format_seconds(analysis.duration),
        "Silences": len(analysis.silences),
        "Keyframes": len(analysis.keyframes),
        "Activity segments": len(analysis.frame_diffs),
        "Suggestions": len(analysis.suggestions),
        "Removable": format_seconds(removable),
    })
