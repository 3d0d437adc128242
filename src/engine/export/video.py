"""
どこで: `engine.export.video`。
何を: `MountainScene` をフレーム番号ごとに決定的に駆動し、ラスタライズした画像を動画（H.264/HEVC/ProRes）へ書き出す。
なぜ: 表示更新と同じ「1 フレーム = tick 1 回 → 状態を読む」の不変条件で、GUI なしに再現可能な動画を作るため。

方針:
- エンコードは imageio（FFMPEG プラグイン, imageio-ffmpeg のバイナリ）に任せる。
  見つからない場合は開始時に明確な RuntimeError を送出。
- 寸法は H.264 都合で偶数に切り下げる。
- 失敗/中断時は途中のファイルを削除して例外を再送出する。
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

import numpy as np

from engine.core.scene import MountainScene
from engine.render.raster import rasterize
from engine.render.types import RenderFrame, RenderMode
from util.paths import ensure_video_dir

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
RenderFn = Callable[[RenderFrame, int, int], np.ndarray]


@dataclass(frozen=True)
class _Codec:
    ffmpeg_name: str
    suffix: str
    pixel_format: str


CODECS: dict[str, _Codec] = {
    "h264": _Codec("libx264", ".mp4", "yuv420p"),
    "hevc": _Codec("libx265", ".mp4", "yuv420p"),
    "prores": _Codec("prores_ks", ".mov", "yuv422p10le"),
}


class ExportCancelled(RuntimeError):
    """書き出しが呼び出し側から中断された。"""


def _even(v: int) -> int:
    return int(v) & ~1  # 最下位ビットを落として偶数へ


@dataclass(frozen=True)
class VideoSettings:
    """書き出し設定（コアの関心外。書き出し時のみ使う）。"""

    width: int
    height: int
    frame_count: int
    fps: int = 60
    codec: str = "h264"

    def __post_init__(self) -> None:
        if self.codec not in CODECS:
            raise ValueError(f"unsupported codec: {self.codec!r} (choose from {sorted(CODECS)})")
        if _even(self.width) < 2 or _even(self.height) < 2:
            raise ValueError(f"invalid video size: {self.width}x{self.height}")
        if self.frame_count < 1:
            raise ValueError(f"frame_count must be >= 1: got {self.frame_count!r}")
        if self.fps < 1:
            raise ValueError(f"fps must be >= 1: got {self.fps!r}")

    @property
    def size(self) -> tuple[int, int]:
        """偶数へ切り下げた (width, height)。"""
        return _even(self.width), _even(self.height)

    @property
    def suffix(self) -> str:
        return CODECS[self.codec].suffix


def _default_video_path(settings: VideoSettings, name_prefix: Optional[str]) -> Path:
    out_dir = ensure_video_dir()
    width, height = settings.size
    dims = f"{width}x{height}_{settings.fps}fps"
    ts = datetime.now().strftime("%y%m%d_%H%M%S")
    if name_prefix and name_prefix.strip():
        base = f"{name_prefix}_{dims}_{ts}"
    else:
        base = f"{dims}_{ts}"
    path = out_dir / f"{base}{settings.suffix}"
    # 一意化
    i = 1
    p = path
    while p.exists():
        p = out_dir / f"{base}-{i}{settings.suffix}"
        i += 1
    return p


@dataclass
class _Writer:
    close: Any
    append_data: Any


def _open_writer(path: Path, settings: VideoSettings) -> _Writer:
    """imageio の FFMPEG writer を作成する。"""
    try:
        import imageio.v2 as iio
    except ImportError as e:
        raise RuntimeError("imageio が見つからないため書き出せません") from e

    codec = CODECS[settings.codec]
    try:
        writer = iio.get_writer(
            str(path),
            format="FFMPEG",
            mode="I",
            fps=int(settings.fps),
            codec=codec.ffmpeg_name,
            pixelformat=codec.pixel_format,
            macro_block_size=1,
        )
    except Exception as e:
        raise RuntimeError(f"動画 writer を開けません（imageio-ffmpeg / {codec.ffmpeg_name}）: {e}") from e
    return _Writer(close=writer.close, append_data=writer.append_data)


class VideoExporter:
    """シーンを固定刻みで駆動して動画ファイルへ書き出す同期エクスポータ。

    Parameters
    ----------
    render : Callable[[RenderFrame, int, int], np.ndarray]
        1 フレームを (h, w, 3) uint8 へ描く関数。既定は `engine.render.raster.rasterize`。
    """

    def __init__(self, render: RenderFn = rasterize) -> None:
        self._render = render

    def export(
        self,
        scene: MountainScene,
        settings: VideoSettings,
        path: str | Path | None = None,
        *,
        name_prefix: Optional[str] = None,
        progress: ProgressCallback | None = None,
        should_cancel: Callable[[], bool] | None = None,
    ) -> Path:
        """書き出して出力パスを返す。

        シーンは出力寸法の縦横比で作り直してから（progress=0）、
        各フレームで `tick()` を 1 回呼んでから状態を描画する。
        """
        width, height = settings.size
        if path is None:
            out_path = _default_video_path(settings, name_prefix)
        else:
            out_path = Path(path)
            out_path.parent.mkdir(parents=True, exist_ok=True)
        if out_path.exists():
            out_path.unlink()

        total = settings.frame_count
        scene.set_viewport(width, height)
        scene.rebuild()

        started = time.perf_counter()
        logger.info(
            "export started: %d frames @ %d fps, %dx%d %s -> %s",
            total,
            settings.fps,
            width,
            height,
            settings.codec,
            out_path.name,
        )
        writer = _open_writer(out_path, settings)
        log_every = max(1, total // 100)
        try:
            if progress is not None:
                progress(0, total)
            for index in range(total):
                if should_cancel is not None and should_cancel():
                    raise ExportCancelled(f"export cancelled at frame {index}")
                scene.tick()
                image = self._render(scene.frame(RenderMode.EXPORT), width, height)
                writer.append_data(image)

                rendered = index + 1
                if progress is not None:
                    progress(rendered, total)
                if rendered == 1 or rendered == total or rendered % log_every == 0:
                    logger.info("%s rendered %d/%d frames", out_path.name, rendered, total)
            writer.close()
        except Exception:
            logger.exception("export failed: %s", out_path)
            try:
                writer.close()
            except Exception:
                logger.debug("writer close after failure raised", exc_info=True)
            out_path.unlink(missing_ok=True)
            raise

        logger.info("export finished: %s in %.2fs", out_path, time.perf_counter() - started)
        return out_path


__all__ = ["VideoSettings", "VideoExporter", "ExportCancelled", "CODECS"]
