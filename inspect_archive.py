#!/usr/bin/env python3
"""
Animation archive inspector

USAGE:
  List the frames in an exported archive, in playback order:
    python3 inspect_archive.py animation_frames.zip

  Extract every frame as numbered PNG files:
    python3 inspect_archive.py animation_frames.zip --extract frames/

ARCHIVE FORMAT:
  A zip with one image per frame named frame_1.png, frame_2.png, ...
  Frames play in numeric order of the suffix, whatever order the zip lists them.
"""
import argparse
import sys
from pathlib import Path

from archive.bridge import ZipArchiveBridge
from state.errors import SketchpadError
from utils.logger import setup_logger

logger = setup_logger()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Inspect or extract an animation frame archive")
    parser.add_argument("archive", help="Path to the .zip archive")
    parser.add_argument("--extract", metavar="DIR", help="Write each frame to DIR as PNG")
    args = parser.parse_args(argv)

    bridge = ZipArchiveBridge()
    try:
        data = Path(args.archive).read_bytes()
    except OSError as e:
        print(f"ERROR: Could not read {args.archive}: {e}")
        return 1

    try:
        frames = bridge.decode_archive(data)
    except SketchpadError as e:
        print(f"ERROR: {e.message}")
        return 1

    print(f"{args.archive}: {len(frames)} frames")
    for index, frame in enumerate(frames):
        print(f"  {bridge.entry_name(index)}: {frame.width}x{frame.height} {frame.mime_type} ({len(frame.data)} bytes)")

    if args.extract:
        out_dir = Path(args.extract)
        out_dir.mkdir(parents=True, exist_ok=True)
        for index, frame in enumerate(frames):
            frame.to_image().save(out_dir / bridge.entry_name(index), format="PNG")
        print(f"Extracted {len(frames)} frames to {out_dir}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
