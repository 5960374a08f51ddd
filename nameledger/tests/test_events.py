from __future__ import annotations

from nameledger.state.events import EventBus, InMemoryEventSink, JsonlEventSink, NullEventSink
from nameledger.types.events import Notification


def _n(seq: int, name: str = "Registered", **args) -> Notification:
    return Notification(name=name, args=args, seq=seq)


def test_in_memory_filters():
    sink = InMemoryEventSink()
    for i, name in enumerate(["Registered", "Renewed", "Registered", "OwnershipTransferred"], start=1):
        sink.append(_n(i, name))
    assert [n.seq for n in sink.get_logs(name="Registered")] == [1, 3]
    assert [n.seq for n in sink.get_logs(from_seq=2, limit=2)] == [2, 3]
    assert sink.names == ["Registered", "Renewed", "Registered", "OwnershipTransferred"]


def test_jsonl_sink_persists_across_instances(tmp_path):
    path = tmp_path / "logs" / "events.jsonl"
    sink = JsonlEventSink(path)
    sink.append(_n(1, record_id=1, owner="alice"))
    sink.append(_n(2, "Renewed", record_id=1, new_expiry=9))
    sink.close()

    reopened = JsonlEventSink(path)
    logs = list(reopened.get_logs())
    reopened.close()
    assert [n.to_dict() for n in logs] == [
        {"seq": 1, "name": "Registered", "args": {"record_id": 1, "owner": "alice"}},
        {"seq": 2, "name": "Renewed", "args": {"record_id": 1, "new_expiry": 9}},
    ]


def test_jsonl_sink_skips_malformed_lines(tmp_path):
    path = tmp_path / "events.jsonl"
    path.write_text('{"seq": 1, "name": "Registered", "args": {}}\nnot json\n', encoding="utf-8")
    sink = JsonlEventSink(path)
    assert [n.seq for n in sink.get_logs()] == [1]
    sink.close()


def test_null_sink_drops_everything():
    sink = NullEventSink()
    sink.append(_n(1))
    assert list(sink.get_logs()) == []


def test_bus_fans_out_and_unsubscribes():
    a, b = InMemoryEventSink(), InMemoryEventSink()
    bus = EventBus([a])
    bus.add_sink(b)
    got = []
    unsubscribe = bus.subscribe(got.append)
    bus.publish([_n(1)])
    unsubscribe()
    bus.publish([_n(2)])
    assert len(a.get_logs()) == len(b.get_logs()) == 2
    assert [n.seq for n in got] == [1]


def test_bus_survives_a_failing_sink():
    class Broken:
        def append(self, n):
            raise OSError("disk full")

        def get_logs(self, **kw):
            return []

        def flush(self):
            pass

        def close(self):
            pass

    good = InMemoryEventSink()
    bus = EventBus([Broken(), good])
    bus.publish([_n(1)])
    assert [n.seq for n in good.get_logs()] == [1]
