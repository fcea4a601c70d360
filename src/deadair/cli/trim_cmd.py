"""deadair trim — cut the suggested pauses out of a video."""

from __future__ import annotations

from pathlib import Path

import click

from deadair.config import apply_overrides, load_config
from deadair.errors import DeadAirError
from deadair.utils.progress import format_seconds, log_error, show_summary


@click.command()
@click.argument("video", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "-c", "config_path", type=click.Path(), help="Path to deadair.yaml")
@click.option("--analysis", "-a", "analysis_path", type=click.Path(), help="analysis.json to use (default: beside the video)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file (default: <video>-trimmed.<ext>)")
@click.option("--min-pause", type=float, help="Pause kept at each silence cut, seconds")
@click.option("--min-confidence", type=float, help="Ignore suggestions below this confidence")
@click.option("--delete-original", is_flag=True, help="Delete VIDEO after a successful trim")
def trim_cmd(
    video: str,
    config_path: str | None,
    analysis_path: str | None,
    output: str | None,
    min_pause: float | None,
    min_confidence: float | None,
    delete_original: bool,
) -> None:
    """Trim VIDEO using a previous analysis."""
    from deadair.trimming.trim import trim_video

    video_path = Path(video).resolve()
    try:
        settings = load_config(config_path, search_dir=video_path.parent)
        settings = apply_overrides(
            settings,
            "trim",
            min_pause_to_keep=min_pause,
            min_confidence=min_confidence,
            keep_original=False if delete_original else None,
        )
        result = trim_video(
            video_path,
            analysis_path=analysis_path,
            output_path=output,
            config=settings.trim,
        )
    except (DeadAirError, ValueError) as e:
        log_error(f"Trim failed: {e}")
        raise SystemExit(1)

    show_summary("Trim", {
        "Output": result.trimmed_path,
        "Original": format_seconds(result.original_duration),
        "Trimmed": format_seconds(result.trimmed_duration),
        "Saved": format_seconds(result.time_saved),
        "Kept segments": len(result.kept_segments),
        "Removed segments": len(result.removed_segments),
    })
