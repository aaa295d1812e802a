"""Meme museum catalog: memes grouped under named museums."""

from memeseum.catalog import MuseumCatalog
from memeseum.storage.records import Record

__all__ = ["MuseumCatalog", "Record"]
