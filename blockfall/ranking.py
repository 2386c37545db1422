"""High-score table kept in a small binary file."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

DEFAULT_PATH = "ranking.dat"
MAX_RANKINGS = 5
NAME_LENGTH = 3
_NAME_BYTES = 8
_RECORD = struct.Struct(f"<{_NAME_BYTES}sii")


@dataclass
class Ranking:
    """One entry: a name of up to three characters, cleared lines and score."""

    name: str
    lines: int = 0
    score: int = 0

    def __post_init__(self) -> None:
        self.name = self.name.split("\0", 1)[0][:NAME_LENGTH]


class RankingManager:
    """Keeps the best entries ordered by descending score.

    Entries with equal scores keep their insertion order. The table is loaded
    from ``path`` on creation.
    """

    def __init__(self, path: str | PathLike[str] = DEFAULT_PATH) -> None:
        self.path = Path(path)
        self._entries: list[Ranking] = []
        self.load()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Ranking]:
        return iter(self._entries)

    @property
    def rankings(self) -> list[Ranking]:
        return list(self._entries)

    def add(self, name: str, lines: int, score: int) -> Ranking:
        """Insert an entry in score order and drop any beyond the table size."""
        entry = Ranking(name, lines, score)
        index = next(
            (i for i, existing in enumerate(self._entries) if existing.score < entry.score),
            len(self._entries),
        )
        self._entries.insert(index, entry)
        del self._entries[MAX_RANKINGS:]
        return entry

    def save(self) -> None:
        """Write the table to ``path``; raises ``OSError`` if that fails."""
        records = b"".join(
            _RECORD.pack(
                entry.name.encode("utf-16-le")[: _NAME_BYTES - 2].ljust(_NAME_BYTES, b"\0"),
                entry.lines,
                entry.score,
            )
            for entry in self._entries
        )
        self.path.write_bytes(records)

    def load(self) -> None:
        """Replace the table with the file's contents; a missing file gives an
        empty table and a trailing partial record is ignored."""
        self.clear()
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            return
        usable = len(data) - len(data) % _RECORD.size
        for raw_name, lines, score in _RECORD.iter_unpack(data[:usable]):
            name = raw_name.decode("utf-16-le", errors="replace")
            self.add(name, lines, score)

    def clear(self) -> None:
        self._entries.clear()

    def top(self) -> Ranking | None:
        """The best entry, or None when the table is empty."""
        return self._entries[0] if self._entries else None