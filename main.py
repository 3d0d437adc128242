from __future__ import annotations

import argparse
import logging

from api import export_video, list_presets
from common.logging import setup_default_logging

logger = logging.getLogger(__name__)


def _progress(done: int, total: int) -> None:
    print(f"\r{done}/{total}", end="" if done < total else "\n", flush=True)


def main(argv: list[str] | None = None) -> int:
    """プリセットを動画へ書き出す CLI。"""
    parser = argparse.ArgumentParser(description="mountain range video export")
    parser.add_argument("preset", nargs="?", default="dolomites")
    parser.add_argument("--width", type=int, default=1920)
    parser.add_argument("--height", type=int, default=1080)
    parser.add_argument("--fps", type=int, default=60)
    parser.add_argument("--frames", type=int, default=600)
    parser.add_argument("--codec", choices=("h264", "hevc", "prores"), default="h264")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--out", default=None, help="出力パス（省略時は data/video/）")
    parser.add_argument("--list", action="store_true", help="プリセット名を表示して終了")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    setup_default_logging(args.log_level)

    if args.list:
        for name in list_presets():
            print(name)
        return 0

    path = export_video(
        args.preset,
        width=args.width,
        height=args.height,
        fps=args.fps,
        frame_count=args.frames,
        codec=args.codec,
        path=args.out,
        seed=args.seed,
        progress=_progress,
    )
    logger.info("saved: %s", path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
