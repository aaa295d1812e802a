"""Primary meme store: one Markdown file per meme, keyed by id.

Files are the source of truth. Every meme is kept in memory once loaded so
reads never touch the disk; inserts write through before updating memory.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path

import frontmatter

logger = logging.getLogger(__name__)

NAMESPACE = "memes"


def _text(value: object) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class Record:
    """One submitted meme. Never changes after creation."""

    id: int
    creator: str
    title: str
    url: str
    collection_name: str
    accumulator: int = 0  # donations; nothing ever writes it

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Record:
        return cls(
            id=int(data["id"]),
            creator=_text(data.get("creator")),
            title=_text(data.get("title")),
            url=_text(data.get("url")),
            collection_name=_text(data.get("collection_name")),
            accumulator=int(data.get("accumulator") or 0),
        )


class RecordStore:
    """Memes by id. In-memory only when ``root`` is None."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = root
        self._records: dict[int, Record] = {}
        if root is not None:
            self._ensure_initialized()
            self.load()

    def _ensure_initialized(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    # ── Persistence ───────────────────────────────────────────

    def load(self) -> None:
        """Scan the namespace directory and rebuild the in-memory map.

        Memes are ordered by id, which matches insertion order for any
        non-decreasing id source.
        """
        self._records.clear()
        if self.root is None or not self.root.is_dir():
            return
        loaded = [r for r in map(self._read, self.root.glob("*.md")) if r is not None]
        for record in sorted(loaded, key=lambda r: r.id):
            self._records[record.id] = record
        logger.debug("Loaded %d memes from %s", len(self._records), self.root)

    def _path(self, meme_id: int) -> Path:
        return self.root / f"{meme_id}.md"

    def _read(self, path: Path) -> Record | None:
        try:
            post = frontmatter.load(str(path))
            return Record.from_dict(post.metadata)
        except Exception as e:
            logger.warning("Skipping unreadable meme file %s: %s", path, e)
            return None

    def _write(self, record: Record) -> None:
        post = frontmatter.Post(f"# {record.title}\n\n{record.url}\n", **record.to_dict())
        self._path(record.id).write_text(frontmatter.dumps(post) + "\n", encoding="utf-8")

    # ── Store operations ──────────────────────────────────────

    def insert(self, record: Record) -> None:
        """Store ``record`` under its id, replacing whatever was there."""
        previous = self._records.get(record.id)
        if previous is not None:
            logger.warning(
                "Meme id %d already taken (museum %s), replacing it",
                record.id,
                previous.collection_name,
            )
        if self.root is not None:
            self._write(record)
        self._records[record.id] = record

    def get(self, meme_id: int) -> Record | None:
        return self._records.get(meme_id)

    def list_all(self) -> list[tuple[int, Record]]:
        return list(self._records.items())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, meme_id: object) -> bool:
        return meme_id in self._records
