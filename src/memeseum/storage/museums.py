"""Museum index: museum name → ordered meme ids.

Only ids are stored here so a meme's data lives in exactly one place. Each
museum is a Markdown file whose frontmatter carries the real name, the
creation ordinal and the id list.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

import frontmatter

if TYPE_CHECKING:
    from memeseum.storage.records import Record, RecordStore

logger = logging.getLogger(__name__)

NAMESPACE = "museums"

# Filename limit is 255 bytes; leave room for "-<n>.md"
_MAX_SLUG_BYTES = 200


class CollectionIndex:
    """Museum membership lists. In-memory only when ``root`` is None."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = root
        self._ids: dict[str, list[int]] = {}
        self._paths: dict[str, Path] = {}
        self._seqs: dict[str, int] = {}
        self._next_seq = 0
        if root is not None:
            self._ensure_initialized()
            self.load()

    def _ensure_initialized(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    # ── Persistence ───────────────────────────────────────────

    def load(self) -> None:
        """Scan museum files once, restoring creation order from ``seq``."""
        self._ids.clear()
        self._paths.clear()
        self._seqs.clear()
        self._next_seq = 0
        if self.root is None or not self.root.is_dir():
            return
        entries = [e for e in map(self._read, self.root.glob("*.md")) if e is not None]
        for seq, path, name, ids in sorted(entries, key=lambda e: (e[0], e[1].name)):
            # Duplicates still claim their seq on disk
            self._next_seq = max(self._next_seq, seq + 1)
            if name in self._ids:
                logger.warning("Duplicate museum %r in %s, keeping %s", name, path, self._paths[name])
                continue
            self._ids[name] = ids
            self._paths[name] = path
            self._seqs[name] = seq
        logger.debug("Loaded %d museums from %s", len(self._ids), self.root)

    def _read(self, path: Path) -> tuple[int, Path, str, list[int]] | None:
        try:
            meta = frontmatter.load(str(path)).metadata
            ids = [int(i) for i in meta.get("memes") or []]
            return int(meta.get("seq") or 0), path, str(meta["name"]), ids
        except Exception as e:
            logger.warning("Skipping unreadable museum file %s: %s", path, e)
            return None

    def _write(self, name: str, ids: list[int]) -> None:
        path = self._paths.get(name)
        seq = self._seqs.get(name)
        if path is None:
            path = self._resolve_path(name)
        if seq is None:
            seq = self._next_seq
        post = frontmatter.Post(f"# {name}\n", name=name, seq=seq, memes=ids)
        path.write_text(frontmatter.dumps(post) + "\n", encoding="utf-8")
        self._paths[name] = path
        self._seqs[name] = seq
        self._next_seq = max(self._next_seq, seq + 1)

    def _slugify(self, name: str) -> str:
        """Minimal slug: strip illegal chars, spaces to hyphens, keep CJK."""
        slug = re.sub(r'[<>:"/\\|?*\n\r\t]', "", name)
        slug = slug.strip().lstrip(".").replace(" ", "-")
        # Cut by bytes, dropping any split multi-byte character
        slug = slug.encode("utf-8")[:_MAX_SLUG_BYTES].decode("utf-8", "ignore")
        return slug or "unnamed"

    def _resolve_path(self, name: str) -> Path:
        """Pick a free file for a new museum; the real name lives in frontmatter."""
        slug = self._slugify(name)
        path = self.root / f"{slug}.md"
        counter = 2
        while path.exists():
            path = self.root / f"{slug}-{counter}.md"
            counter += 1
        return path

    # ── Index operations ──────────────────────────────────────

    def append(self, name: str, meme_id: int) -> None:
        """Add ``meme_id`` to the end of ``name``, creating the museum if needed."""
        created = name not in self._ids
        ids = [*self._ids.get(name, []), meme_id]
        if self.root is not None:
            self._write(name, ids)
        self._ids[name] = ids
        if created:
            logger.info("Created museum: %s", name)

    def get(self, name: str) -> list[int] | None:
        ids = self._ids.get(name)
        return list(ids) if ids is not None else None

    def list_names(self) -> list[str]:
        return list(self._ids)

    def resolve(self, name: str, store: RecordStore) -> list[Record]:
        """Look up every meme of ``name``, skipping ids the store no longer has."""
        ids = self._ids.get(name)
        if ids is None:
            return []
        records = []
        for meme_id in ids:
            record = store.get(meme_id)
            if record is None:
                logger.debug("Museum %s references missing meme %d", name, meme_id)
                continue
            records.append(record)
        return records
