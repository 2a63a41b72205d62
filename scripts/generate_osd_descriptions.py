#!/usr/bin/env python3
"""
Regenerate the OSD description database from a directory of OSD text files.

Same conversion as `soilviz osd build-descriptions`, for use in data refresh
jobs that run outside the installed CLI.
"""

import sys
from pathlib import Path

from soilviz.logging_config import configure_from_env
from soilviz.osd.descriptions import build_descriptions

DEFAULT_OUTPUT = Path("data/osd-descriptions.json")


def main():
    if len(sys.argv) < 2:
        print("Usage: uv run python scripts/generate_osd_descriptions.py <osd-dir> [output.json]")
        print()
        print("Example:")
        print("  uv run python scripts/generate_osd_descriptions.py ../OSD data/osd-descriptions.json")
        return 2

    configure_from_env()

    source = Path(sys.argv[1])
    output = Path(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_OUTPUT

    print(f"📂 Reading OSD files from {source}")
    try:
        report = build_descriptions(source, output)
    except FileNotFoundError as e:
        print(f"❌ {e}")
        return 1

    print(f"✅ Wrote {report.entries} descriptions to {report.output_file}")
    print(f"   {report.processed} files processed in {report.subdirectories} subdirectories")
    if report.errors:
        print(f"⚠️  {report.errors} files failed:")
        for name in report.failed_files:
            print(f"   {name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
