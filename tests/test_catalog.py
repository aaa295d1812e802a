"""Tests for the museum catalog facade."""

from __future__ import annotations

import logging

import pytest
from pathlib import Path

from memeseum.catalog import MuseumCatalog
from memeseum.events import MemeCreated, log_announcement
from memeseum.ids import ClockIdentifierSource, SequenceIdentifierSource
from memeseum.storage.museums import CollectionIndex
from memeseum.storage.records import Record, RecordStore


class StepIdentifierSource:
    """Advances only when told to, like an external block height."""

    def __init__(self, height: int = 100):
        self.height = height

    def mint(self) -> int:
        return self.height

    def advance(self, steps: int = 1) -> None:
        self.height += steps


@pytest.fixture
def ids() -> StepIdentifierSource:
    return StepIdentifierSource()


@pytest.fixture
def catalog(tmp_path: Path, ids: StepIdentifierSource) -> MuseumCatalog:
    return MuseumCatalog(
        RecordStore(tmp_path / "memes"),
        CollectionIndex(tmp_path / "museums"),
        ids,
    )


class TestCreate:
    def test_create_and_get(self, catalog: MuseumCatalog):
        created = catalog.create("T1", "U1", "M1", "alice")
        record = catalog.get(created.id)
        assert record == created
        assert record.title == "T1"
        assert record.url == "U1"
        assert record.collection_name == "M1"
        assert record.creator == "alice"
        assert record.accumulator == 0

    def test_id_comes_from_source(self, catalog: MuseumCatalog, ids: StepIdentifierSource):
        assert catalog.create("T1", "U1", "M1", "alice").id == 100
        ids.advance()
        assert catalog.create("T2", "U2", "M1", "alice").id == 101

    def test_two_in_same_museum(self, catalog: MuseumCatalog, ids: StepIdentifierSource):
        first = catalog.create("T1", "U1", "M1", "alice")
        ids.advance()
        second = catalog.create("T2", "U2", "M1", "bob")
        assert catalog.list_collection_records("M1") == [first, second]

    def test_empty_strings_accepted(self, catalog: MuseumCatalog):
        record = catalog.create("", "", "", "")
        assert catalog.list_collection_names() == [""]
        assert catalog.list_collection_records("") == [record]

    def test_list_all(self, catalog: MuseumCatalog, ids: StepIdentifierSource):
        first = catalog.create("T1", "U1", "M1", "alice")
        ids.advance()
        second = catalog.create("T2", "U2", "M2", "alice")
        assert catalog.list_all() == [(100, first), (101, second)]


class TestReads:
    def test_unknown_museum_is_empty(self, catalog: MuseumCatalog):
        assert catalog.list_collection_records("unknown") == []

    def test_get_missing(self, catalog: MuseumCatalog):
        assert catalog.get(1) is None

    def test_museum_names_only_from_creates(self, catalog: MuseumCatalog, ids: StepIdentifierSource):
        assert catalog.list_collection_names() == []
        catalog.create("T1", "U1", "M1", "alice")
        ids.advance()
        catalog.create("T2", "U2", "M2", "alice")
        ids.advance()
        catalog.create("T3", "U3", "M1", "alice")
        assert catalog.list_collection_names() == ["M1", "M2"]

    def test_reads_are_idempotent(self, catalog: MuseumCatalog, ids: StepIdentifierSource):
        catalog.create("T1", "U1", "M1", "alice")
        ids.advance()
        catalog.create("T2", "U2", "M2", "alice")
        for read in (
            catalog.list_all,
            catalog.list_collection_names,
            lambda: catalog.list_collection_records("M1"),
            lambda: catalog.get(100),
        ):
            assert read() == read()


class TestIdCollision:
    def test_collision_across_museums(self, catalog: MuseumCatalog):
        catalog.create("T1", "U1", "M1", "alice")
        second = catalog.create("T2", "U2", "M2", "bob")
        assert catalog.get(100) == second
        assert catalog.list_collection_records("M1") == []
        assert catalog.list_collection_records("M2") == [second]
        # The stale id stays in the index
        assert catalog.index.get("M1") == [100]
        assert catalog.list_collection_names() == ["M1", "M2"]

    def test_collision_in_same_museum(self, catalog: MuseumCatalog):
        catalog.create("T1", "U1", "M1", "alice")
        second = catalog.create("T2", "U2", "M1", "bob")
        assert catalog.list_collection_records("M1") == [second, second]
        assert len(catalog.list_all()) == 1

    def test_sequence_policy_avoids_collisions(self, tmp_path: Path):
        catalog = MuseumCatalog(RecordStore(), CollectionIndex(), SequenceIdentifierSource())
        first = catalog.create("T1", "U1", "M1", "alice")
        second = catalog.create("T2", "U2", "M2", "bob")
        assert first.id != second.id
        assert catalog.list_collection_records("M1") == [first]


class TestEvents:
    def test_listener_receives_created_meme(self, catalog: MuseumCatalog):
        events: list[MemeCreated] = []
        catalog.subscribe(events.append)
        record = catalog.create("T1", "U1", "M1", "alice")
        assert events == [MemeCreated(record)]
        assert events[0].museum == "M1"
        assert events[0].meme_id == 100

    def test_announcement_is_logged(self, catalog: MuseumCatalog, caplog):
        caplog.set_level(logging.INFO, logger="memeseum.events")
        catalog.subscribe(log_announcement)
        catalog.create("T1", "U1", "M1", "alice")
        assert "New meme added. Museum: M1, Meme id: 100" in caplog.text

    def test_failing_listener_does_not_fail_create(self, catalog: MuseumCatalog, caplog):
        def boom(event: MemeCreated) -> None:
            raise RuntimeError("listener down")

        seen: list[MemeCreated] = []
        catalog.subscribe(boom)
        catalog.subscribe(seen.append)
        record = catalog.create("T1", "U1", "M1", "alice")
        assert catalog.get(record.id) == record
        assert len(seen) == 1
        assert "listener down" in caplog.text


class TestOpen:
    def test_collision_survives_reopen(self, catalog: MuseumCatalog, tmp_path: Path):
        catalog.create("T1", "U1", "M1", "alice")
        second = catalog.create("T2", "U2", "M2", "bob")

        reopened = MuseumCatalog.open(tmp_path, id_policy="sequence")
        assert reopened.get(100) == second
        assert reopened.list_collection_records("M1") == []
        assert reopened.index.get("M1") == [100]
        assert reopened.list_collection_records("M2") == [second]
        assert reopened.list_collection_names() == ["M1", "M2"]

    def test_clock_never_mints_below_stored_ids(
        self, catalog: MuseumCatalog, ids: StepIdentifierSource, tmp_path: Path
    ):
        ids.height = 10**12
        catalog.create("T1", "U1", "M1", "alice")

        # A coarser step would put the wall clock far below the stored id
        reopened = MuseumCatalog.open(tmp_path, id_policy="clock", clock_step=60.0)
        record = reopened.create("T2", "U2", "M1", "bob")
        assert record.id >= 10**12
        before = reopened.list_all()
        assert MuseumCatalog.open(tmp_path, id_policy="clock", clock_step=60.0).list_all() == before

    def test_reopen_restores_everything(self, tmp_path: Path):
        catalog = MuseumCatalog.open(tmp_path, id_policy="sequence")
        catalog.create("T1", "U1", "M1", "alice")
        catalog.create("T2", "U2", "M2", "bob")
        catalog.create("T3", "U3", "M1", "carol")

        reopened = MuseumCatalog.open(tmp_path, id_policy="sequence")
        assert reopened.list_all() == catalog.list_all()
        assert reopened.list_collection_names() == ["M1", "M2"]
        assert reopened.list_collection_records("M1") == catalog.list_collection_records("M1")

    def test_sequence_resumes_after_highest_id(self, tmp_path: Path):
        catalog = MuseumCatalog.open(tmp_path, id_policy="sequence")
        catalog.create("T1", "U1", "M1", "alice")
        catalog.create("T2", "U2", "M1", "alice")
        reopened = MuseumCatalog.open(tmp_path, id_policy="sequence")
        assert reopened.create("T3", "U3", "M1", "alice").id == 3

    def test_namespaces_on_disk(self, tmp_path: Path):
        catalog = MuseumCatalog.open(tmp_path, id_policy="sequence")
        catalog.create("T1", "U1", "M1", "alice")
        assert (tmp_path / "memes" / "1.md").exists()
        assert (tmp_path / "museums" / "M1.md").exists()

    def test_default_policy_is_clock(self, tmp_path: Path):
        assert isinstance(MuseumCatalog.open(tmp_path).ids, ClockIdentifierSource)

    def test_unknown_policy(self, tmp_path: Path):
        with pytest.raises(ValueError):
            MuseumCatalog.open(tmp_path, id_policy="random")

    def test_open_logs_announcements(self, tmp_path: Path, caplog):
        caplog.set_level(logging.INFO, logger="memeseum")
        catalog = MuseumCatalog.open(tmp_path, id_policy="sequence")
        catalog.create("T1", "U1", "Hall", "alice")
        assert "New meme added. Museum: Hall, Meme id: 1" in caplog.text


def test_record_type_exported():
    from memeseum import MuseumCatalog as Exported, Record as ExportedRecord

    assert Exported is MuseumCatalog
    assert ExportedRecord is Record
