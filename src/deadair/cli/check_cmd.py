"""deadair check — verify the ffmpeg toolchain is available."""

from __future__ import annotations

import shutil

import click

from deadair.utils.ffmpeg import get_ffmpeg_version
from deadair.utils.progress import log_error, log_success


@click.command()
def check_cmd() -> None:
    """Check that ffmpeg and ffprobe are installed."""
    version = get_ffmpeg_version()
    if version is None:
        log_error("ffmpeg not found. Install it (brew install ffmpeg / sudo apt install ffmpeg).")
        raise SystemExit(1)
    log_success(f"ffmpeg {version}")

    if shutil.which("ffprobe") is None:
        log_error("ffprobe not found. It ships with ffmpeg; check your PATH.")
        raise SystemExit(1)
    log_success("ffprobe available")
