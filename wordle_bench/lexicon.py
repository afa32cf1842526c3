"""Word-list loading for the command line.

Supports two formats:
  - Plain text: one word per line (``#`` starts a comment line)
  - CSV with a ``word`` column (other columns such as ``count`` are ignored)

File order is kept, since the order of the answer list is part of a
corpus's identity.
"""

from __future__ import annotations

import csv
import re
import unicodedata
from pathlib import Path


def _strip_accents(text: str) -> str:
    nfkd = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in nfkd if unicodedata.category(ch) != "Mn")


def _clean(raw: str) -> str:
    return _strip_accents(raw.strip().lower())


def _read_txt(path: Path) -> list[str]:
    return [
        line for line in path.read_text(encoding="utf-8").splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    ]


def _read_csv(path: Path) -> list[str]:
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None or "word" not in reader.fieldnames:
            raise ValueError(f"{path} has no 'word' column")
        return [row["word"] for row in reader]


def load_words(
    path: str | Path,
    word_length: int = 5,
    sort: bool = False,
) -> list[str]:
    """Load words of exactly *word_length* letters from *path*.

    Words are lower-cased and stripped of accents; duplicates and words
    with the wrong length or non-letter characters are dropped.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If no usable word is found.
    """
    src = Path(path)
    if not src.exists():
        raise FileNotFoundError(f"Word list not found: {src}")

    raw = _read_csv(src) if src.suffix == ".csv" else _read_txt(src)

    pattern = re.compile(rf"^[a-z]{{{word_length}}}$")
    seen: set[str] = set()
    words: list[str] = []
    for item in raw:
        w = _clean(item)
        if not w or w in seen:
            continue
        if pattern.match(w):
            seen.add(w)
            words.append(w)

    if not words:
        raise ValueError(f"No {word_length}-letter words found in {src}")
    if sort:
        words.sort()
    return words
