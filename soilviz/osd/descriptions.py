"""Batch conversion of OSD text files into a JSON description database.

The database maps upper-cased series names to ``OSDDescriptionEntry``
records and is what the dashboard reads at runtime through
:class:`OSDDescriptionStore`.
"""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from soilviz.logging_config import get_logger
from soilviz.osd.models import BuildReport, OSDDescriptionEntry
from soilviz.osd.narrative import parse_osd_text

logger = get_logger(__name__)

PROGRESS_EVERY = 500
SAMPLE_COUNT = 2
SAMPLE_LENGTH = 250

# Headings that must never leak into a generated narrative
UNWANTED_SECTIONS = [
    "TAXONOMIC CLASS",
    "TYPICAL PEDON",
    "TYPE LOCATION",
    "COMPETING SERIES",
    "GEOGRAPHICALLY ASSOCIATED SOILS",
    "DISTRIBUTION AND EXTENT",
    "REMARKS",
]

DEFAULT_CHECK_SERIES = ["COBURG", "ABBOTT", "WILLAMETTE"]


def build_descriptions(
    source_dir: str | Path,
    output_file: str | Path,
    now: datetime | None = None,
) -> BuildReport:
    """Parse every ``<letter>/<SERIES>.txt`` under ``source_dir`` and write JSON.

    A failure in one file is logged and counted; the run continues.

    Args:
        source_dir: Directory whose subdirectories hold OSD text files
        output_file: JSON file to write (parent directories are created)
        now: Timestamp recorded as ``lastUpdated`` (defaults to current UTC)

    Returns:
        BuildReport with counts and sample descriptions
    """
    source = Path(source_dir)
    output = Path(output_file)
    if not source.is_dir():
        raise FileNotFoundError(f"OSD source directory not found: {source}")

    stamp = (now or datetime.now(UTC)).isoformat()
    logger.info(f"Starting OSD text file processing from {source}")

    descriptions: dict[str, dict[str, Any]] = {}
    report = BuildReport(output_file=str(output))

    subdirs = sorted(p for p in source.iterdir() if p.is_dir())
    report.subdirectories = len(subdirs)
    logger.info(f"Found {len(subdirs)} subdirectories")

    for subdir in subdirs:
        files = sorted(subdir.glob("*.txt"))
        logger.info(f"Processing {subdir.name}/: {len(files)} files")

        for path in files:
            series = path.stem.upper()
            try:
                content = path.read_text(encoding="utf-8")
                parsed = parse_osd_text(content, path.stem)
                entry = OSDDescriptionEntry(
                    series=series,
                    description=parsed.full_description,
                    range_characteristics=parsed.range_characteristics,
                    last_updated=stamp,
                )
                descriptions[series] = entry.model_dump(mode="json", by_alias=True)
                report.processed += 1

                if report.processed % PROGRESS_EVERY == 0:
                    logger.info(f"  Processed {report.processed} files...")
            except Exception as e:
                logger.error(f"Error processing {path.name}: {e}")
                report.errors += 1
                report.failed_files.append(str(path))

    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        json.dump(descriptions, f, indent=2, ensure_ascii=False)

    report.entries = len(descriptions)
    report.samples = {
        series: descriptions[series]["description"][:SAMPLE_LENGTH]
        for series in list(descriptions)[:SAMPLE_COUNT]
    }

    logger.info(
        f"Processing complete: {report.processed} files, {report.errors} errors, "
        f"{report.entries} entries written to {output}"
    )
    return report


def check_descriptions(
    database: dict[str, Any], series: list[str] | None = None
) -> dict[str, list[str]]:
    """Report raw OSD headings that leaked into generated descriptions.

    Args:
        database: Loaded description database
        series: Series to check; all entries when omitted

    Returns:
        Mapping of series name to the offending headings. Requested series
        that are absent map to ``["NOT FOUND"]``; clean series map to ``[]``.
    """
    names = [s.upper() for s in series] if series else list(database)
    findings: dict[str, list[str]] = {}

    for name in names:
        entry = database.get(name)
        if entry is None:
            findings[name] = ["NOT FOUND"]
            continue
        text = entry if isinstance(entry, str) else json.dumps(entry)
        findings[name] = [s for s in UNWANTED_SECTIONS if s in text]

    return findings


def load_database(path: str | Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


class OSDDescriptionStore:
    """Lazy, cached reader for the generated description database."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: dict[str, OSDDescriptionEntry] | None = None

    @property
    def is_loaded(self) -> bool:
        return self._data is not None

    def load(self) -> dict[str, OSDDescriptionEntry]:
        """Read the database once; later calls return the cached mapping."""
        if self._data is None:
            raw = load_database(self.path)
            self._data = {
                key: OSDDescriptionEntry.model_validate(value)
                for key, value in raw.items()
            }
            logger.info(f"Loaded {len(self._data)} OSD descriptions from {self.path}")
        return self._data

    def get_description(self, series_name: str) -> OSDDescriptionEntry | None:
        return self.load().get(series_name.upper())

    def get_description_text(self, series_name: str) -> str | None:
        entry = self.get_description(series_name)
        return entry.description if entry and entry.description else None

    def clear_cache(self) -> None:
        self._data = None
