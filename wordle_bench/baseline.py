"""On-disk baseline store.

Each baseline is one JSON file in the store directory, named after its
strategy and tag.  The file holds the serialized record plus a small
``baseline`` block with the key it was saved under::

    {
      "format_version": 1,
      "strategy": {"name": "FirstCandidate", "version": "1.0.0", "hard_mode": false},
      "corpus": {"tag": "nyt", "fingerprint": "...", "words": ["cigar", ...]},
      "max_turns": 6,
      "outcomes": [{"word": "cigar", "status": "solved", "turns": 4}, ...],
      "baseline": {"strategy": "FirstCandidate", "tag": "nyt", "saved_at": "..."}
    }
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from wordle_bench.errors import BaselineExists, BaselineFormatError, BaselineNotFound
from wordle_bench.perf import FORMAT_VERSION, PerformanceRecord

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class BaselineKey:
    """Address of a baseline: strategy name plus a version/corpus tag."""

    strategy: str
    tag: str = "default"

    @classmethod
    def for_record(cls, record: PerformanceRecord, tag: str | None = None) -> BaselineKey:
        return cls(record.strategy_name, tag if tag is not None else record.corpus.tag)

    @property
    def filename(self) -> str:
        return f"{_slug(self.strategy)}@{_slug(self.tag)}.json"

    def __str__(self) -> str:
        return f"{self.strategy}@{self.tag}"


def _slug(text: str) -> str:
    return _UNSAFE.sub("_", text.strip()) or "_"


class BaselineStore:
    """Read and write :class:`PerformanceRecord` baselines under *directory*."""

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, key: BaselineKey) -> Path:
        return self._dir / key.filename

    def exists(self, key: BaselineKey) -> bool:
        return self.path_for(key).is_file()

    def save(
        self,
        record: PerformanceRecord,
        key: BaselineKey | None = None,
        force: bool = False,
    ) -> Path:
        """Atomically write *record* (write tmp then rename).

        Raises
        ------
        BaselineExists
            If a baseline is already stored under *key* and *force* is False.
        """
        key = key or BaselineKey.for_record(record)
        path = self.path_for(key)
        if path.exists() and not force:
            raise BaselineExists(f"baseline {key} already exists at {path} (use force to overwrite)")

        data = record.to_dict()
        data["baseline"] = {
            "strategy": key.strategy,
            "tag": key.tag,
            "saved_at": datetime.now(timezone.utc).isoformat(),
        }

        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp, str(path))
        except BaseException:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise
        logger.info("saved baseline %s to %s", key, path)
        return path

    def load(self, key: BaselineKey) -> PerformanceRecord:
        """Load the baseline stored under *key*.

        Raises
        ------
        BaselineNotFound
            If no file exists for *key*.
        BaselineFormatError
            If the file is not valid JSON, has an unknown format version,
            or is missing fields.
        """
        path = self.path_for(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise BaselineNotFound(f"no baseline {key} in {self._dir}") from None
        except (OSError, UnicodeDecodeError) as exc:
            raise BaselineFormatError(f"cannot read baseline {path}: {exc}") from exc

        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise BaselineFormatError(f"baseline {path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise BaselineFormatError(f"baseline {path} must hold a JSON object")

        version = data.get("format_version")
        if version != FORMAT_VERSION:
            raise BaselineFormatError(
                f"baseline {path} has format_version {version!r}, expected {FORMAT_VERSION}"
            )
        try:
            record = PerformanceRecord.from_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise BaselineFormatError(f"baseline {path} is malformed: {exc!r}") from exc
        logger.debug("loaded baseline %s (%d outcomes)", key, record.num_tried())
        return record

    def delete(self, key: BaselineKey) -> None:
        try:
            self.path_for(key).unlink()
        except FileNotFoundError:
            raise BaselineNotFound(f"no baseline {key} in {self._dir}") from None

    def keys(self) -> list[BaselineKey]:
        """Keys of every readable baseline in the store, sorted."""
        if not self._dir.is_dir():
            return []
        found: list[BaselineKey] = []
        for path in sorted(self._dir.glob("*.json")):
            try:
                block = json.loads(path.read_text(encoding="utf-8"))["baseline"]
                found.append(BaselineKey(str(block["strategy"]), str(block["tag"])))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError) as exc:
                logger.warning("skipping unreadable baseline file %s: %r", path, exc)
        return sorted(found, key=lambda k: (k.strategy, k.tag))
