"""Tests for snapshot record parsing."""

import pytest

from probedash.exceptions import SnapshotFormatError
from probedash.models import (
    ActorNode,
    Fiber,
    FiberStatus,
    StatusTally,
    parse_actors,
    parse_fibers,
)


class TestFiberStatus:

    @pytest.mark.parametrize("raw, expected", [
        ("Running", FiberStatus.RUNNING),
        ("suspended", FiberStatus.SUSPENDED),
        ("FINISHING", FiberStatus.FINISHING),
        (" done ", FiberStatus.DONE),
    ])
    def test_parse(self, raw, expected):
        assert FiberStatus.parse(raw) is expected

    @pytest.mark.parametrize("raw", ["Sleeping", None, 3])
    def test_parse_unknown(self, raw):
        with pytest.raises(SnapshotFormatError):
            FiberStatus.parse(raw)


class TestFiberFromDict:

    def test_full_record(self):
        fiber = Fiber.from_dict({"id": 2, "parent_id": 1, "status": "Suspended", "dump": "trace"})
        assert fiber == Fiber(2, 1, FiberStatus.SUSPENDED, "trace")
        assert fiber.tag == "2"

    def test_root_record(self):
        fiber = Fiber.from_dict({"id": 7, "status": "Done"})
        assert fiber.parent_id is None
        assert fiber.id == 7
        assert fiber.dump == ""

    @pytest.mark.parametrize("data", [
        {"status": "Running"},
        {"id": "x", "status": "Running"},
        {"id": "7", "status": "Running"},
        {"id": 1.5, "status": "Running"},
        {"id": 1, "parent_id": 2.0, "status": "Running"},
        {"id": True, "status": "Running"},
        {"id": 1, "parent_id": [], "status": "Running"},
        {"id": 1},
        "fiber",
    ])
    def test_malformed(self, data):
        with pytest.raises(SnapshotFormatError):
            Fiber.from_dict(data)

    def test_null_dump_is_empty(self):
        fiber = Fiber.from_dict({"id": 1, "status": "Running", "dump": None})
        assert fiber.dump == ""

    def test_fractional_id_does_not_collide(self):
        with pytest.raises(SnapshotFormatError):
            parse_fibers([
                {"id": 1, "status": "Running"},
                {"id": 1.5, "status": "Running"},
            ])

    def test_parse_fibers_requires_list(self):
        with pytest.raises(SnapshotFormatError):
            parse_fibers({"id": 1})


class TestActorNode:

    def test_from_dict(self):
        actor = ActorNode.from_dict({"id": 3, "parent_id": 1, "name": "worker"})
        assert actor == ActorNode(3, 1, "worker")
        assert actor.tag == "worker"

    def test_blank_name_falls_back_to_id(self):
        assert ActorNode.from_dict({"id": 3}).tag == "3"

    def test_parse_actors(self):
        actors = parse_actors([{"id": 1, "name": "user"}, {"id": 2, "parent_id": 1, "name": "a"}])
        assert [a.id for a in actors] == [1, 2]

    def test_parse_actors_requires_list(self):
        with pytest.raises(SnapshotFormatError):
            parse_actors(None)


class TestStatusTally:

    def test_counts_sum_to_snapshot_size(self):
        fibers = [
            Fiber(1, None, FiberStatus.RUNNING, ""),
            Fiber(2, None, FiberStatus.RUNNING, ""),
            Fiber(3, None, FiberStatus.DONE, ""),
            Fiber(4, None, FiberStatus.FINISHING, ""),
            Fiber(5, None, FiberStatus.SUSPENDED, ""),
        ]
        tally = StatusTally.of(fibers)
        assert tally == StatusTally(done=1, suspended=1, running=2, finishing=1)
        assert tally.total == len(fibers)

    def test_empty_snapshot(self):
        assert StatusTally.of([]) == StatusTally()
