"""Catalog operations as plain callables.

These wrap the catalog for any outer binding (CLI, RPC, agent tools) and
return JSON-ready values only.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from memeseum.catalog import MuseumCatalog


def get_catalog_tools(catalog: MuseumCatalog, creator: str) -> dict[str, Callable]:
    """Return a dict of operation_name -> callable.

    ``creator`` is the caller identity stamped on every meme created through
    these tools.
    """

    def create(title: str, url: str, collection_name: str) -> dict:
        """Create a meme in the given museum and return it."""
        return catalog.create(title, url, collection_name, creator).to_dict()

    def get_record(id: int) -> dict | None:
        """Return one meme by id, or None if there is none."""
        record = catalog.get(id)
        return record.to_dict() if record else None

    def list_records() -> list[list]:
        """Return every meme as [id, meme] pairs."""
        return [[meme_id, record.to_dict()] for meme_id, record in catalog.list_all()]

    def list_collections() -> list[str]:
        """Return all museum names."""
        return catalog.list_collection_names()

    def list_collection_records(collection_name: str) -> list[dict]:
        """Return the memes of one museum in the order they were added."""
        return [r.to_dict() for r in catalog.list_collection_records(collection_name)]

    return {
        "create": create,
        "get_record": get_record,
        "list_records": list_records,
        "list_collections": list_collections,
        "list_collection_records": list_collection_records,
    }
