"""Museum catalog: the single entry point for meme operations.

Responsibilities:
1. Mint an id for every new meme
2. Write the meme to the record store, then index it under its museum
3. Announce the creation to subscribed listeners
4. Serve reads by id, in full, or by museum
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from memeseum.events import MemeCreated, log_announcement
from memeseum.ids import build_identifier_source
from memeseum.storage import museums, records
from memeseum.storage.museums import CollectionIndex
from memeseum.storage.records import Record, RecordStore

if TYPE_CHECKING:
    from memeseum.events import CreationListener
    from memeseum.ids import IdentifierSource

logger = logging.getLogger(__name__)


class MuseumCatalog:
    """Keeps the record store and the museum index in step."""

    def __init__(
        self,
        store: RecordStore,
        index: CollectionIndex,
        ids: IdentifierSource,
    ) -> None:
        self.store = store
        self.index = index
        self.ids = ids
        self._listeners: list[CreationListener] = []

    @classmethod
    def open(
        cls,
        data_dir: Path,
        id_policy: str = "clock",
        clock_step: float = 1.0,
    ) -> MuseumCatalog:
        """Load a file-backed catalog rooted at ``data_dir``."""
        store = RecordStore(data_dir / records.NAMESPACE)
        index = CollectionIndex(data_dir / museums.NAMESPACE)
        start = max((meme_id for meme_id, _ in store.list_all()), default=0) + 1
        ids = build_identifier_source(id_policy, start=start, clock_step=clock_step)

        catalog = cls(store, index, ids)
        catalog.subscribe(log_announcement)
        logger.info(
            "Opened catalog at %s (%d memes, %d museums, id_policy=%s)",
            data_dir,
            len(store),
            len(index.list_names()),
            id_policy,
        )
        return catalog

    # ── Listeners ─────────────────────────────────────────────

    def subscribe(self, listener: CreationListener) -> None:
        self._listeners.append(listener)

    def _emit(self, event: MemeCreated) -> None:
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Creation listener %r failed for meme %d", listener, event.meme_id)

    # ── Writes ────────────────────────────────────────────────

    def create(self, title: str, url: str, collection_name: str, creator: str) -> Record:
        """Store a new meme and add it to ``collection_name``."""
        record = Record(
            id=self.ids.mint(),
            creator=creator,
            title=title,
            url=url,
            collection_name=collection_name,
            accumulator=0,
        )
        self.store.insert(record)
        self.index.append(collection_name, record.id)
        self._emit(MemeCreated(record))
        return record

    # ── Reads ─────────────────────────────────────────────────

    def get(self, meme_id: int) -> Record | None:
        return self.store.get(meme_id)

    def list_all(self) -> list[tuple[int, Record]]:
        return self.store.list_all()

    def list_collection_names(self) -> list[str]:
        return self.index.list_names()

    def list_collection_records(self, name: str) -> list[Record]:
        return self.index.resolve(name, self.store)
