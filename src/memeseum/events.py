"""Catalog events and listener types."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from memeseum.storage.records import Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemeCreated:
    """Emitted once a meme is stored and indexed."""

    record: Record

    @property
    def museum(self) -> str:
        return self.record.collection_name

    @property
    def meme_id(self) -> int:
        return self.record.id


# Callback type: registered via MuseumCatalog.subscribe
CreationListener = Callable[[MemeCreated], None]


def log_announcement(event: MemeCreated) -> None:
    logger.info("New meme added. Museum: %s, Meme id: %d", event.museum, event.meme_id)
