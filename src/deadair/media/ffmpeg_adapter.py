"""MediaToolAdapter backed by the ffmpeg/ffprobe command line tools."""

from __future__ import annotations

from pathlib import Path

from deadair.utils import ffmpeg
from deadair.utils.ffprobe import probe_duration, probe_video
from deadair.utils.progress import log_warning
from deadair.utils.retry import retry_on_timeout

FRAME_TIMEOUT = 60.0  # seconds


class FFmpegAdapter:
    """Shells out to ffmpeg for every operation."""

    name = "ffmpeg"

    def __init__(
        self,
        *,
        timeout: float | None = None,
        crf: int = 23,
        preset: str = "medium",
    ) -> None:
        self.timeout = timeout or ffmpeg.DEFAULT_TIMEOUT
        self.crf = crf
        self.preset = preset

    def probe_duration(self, path: Path) -> float:
        return probe_duration(path)

    @retry_on_timeout()
    def extract_frame(self, path: Path, at_sec: float, out_path: Path) -> None:
        ffmpeg.extract_frame(path, out_path, at_sec, timeout=min(self.timeout, FRAME_TIMEOUT))

    def extract_subclip(
        self, path: Path, start_sec: float, end_sec: float, out_path: Path
    ) -> None:
        ffmpeg.extract_subclip(
            path,
            out_path,
            start_sec,
            end_sec,
            has_audio=probe_video(path).has_audio,
            crf=self.crf,
            preset=self.preset,
            timeout=self.timeout,
        )

    def detect_silence(self, path: Path, threshold_db: float, min_duration_sec: float) -> str:
        # silencedetect needs an audio stream; screen recordings often lack one
        if not probe_video(path).has_audio:
            log_warning(f"{Path(path).name} has no audio stream, skipping silence detection")
            return ""
        return ffmpeg.silencedetect(path, threshold_db, min_duration_sec, timeout=self.timeout)

    def detect_scenes(self, path: Path, out_dir: Path, threshold: float) -> str:
        return ffmpeg.scenedetect(path, out_dir, threshold, timeout=self.timeout)

    def concat_segments(
        self, path: Path, segments: list[tuple[float, float]], out_path: Path
    ) -> None:
        ffmpeg.concat_segments(
            path,
            out_path,
            segments,
            has_audio=probe_video(path).has_audio,
            crf=self.crf,
            preset=self.preset,
            timeout=self.timeout,
        )
