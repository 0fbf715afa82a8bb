import threading

import pytest
from rdflib import Literal, URIRef

from lubm_bench.failures import IngestionError, IntakeRunning, InvalidTriple
from lubm_bench.intake import Intake
from lubm_bench.store import EphemeralStore, Pattern, TripleStore

P = URIRef("http://example.org/p")


def bag(index, size=2):
    subject = URIRef(f"http://example.org/s{index}")
    return [(subject, P, Literal(f"{index}-{j}")) for j in range(size)]


class RecordingStore(TripleStore):
    """
    Store that remembers the order of the bags and optionally rejects one of them.
    """

    def __init__(self, reject: int = -1):
        self.bags = []
        self.reject = reject
        self.threads = set()

    def add(self, bag):
        self.threads.add(threading.get_ident())
        if len(self.bags) == self.reject:
            raise InvalidTriple(bag[0], "rejected")
        self.bags.append(bag)

    def match(self, pattern):
        return iter(())

    def __len__(self):
        return sum(len(bag) for bag in self.bags)


def test_size_counts_every_triple():
    store = EphemeralStore()
    intake = Intake(store, maxsize=2)
    for index in range(10):
        intake.put(bag(index, size=3))
    assert intake.join() == 30
    assert intake.size == 30
    assert len(store) == 30


def test_bags_are_ingested_in_order_by_one_thread():
    store = RecordingStore()
    with Intake(store, maxsize=1) as intake:
        for index in range(20):
            intake.put(bag(index))
    assert store.bags == [bag(index) for index in range(20)]
    assert len(store.threads) == 1
    assert threading.get_ident() not in store.threads


def test_empty_intake():
    store = EphemeralStore()
    with Intake(store) as intake:
        pass
    assert intake.size == 0


def test_failure_surfaces_on_join():
    store = RecordingStore(reject=1)
    intake = Intake(store, maxsize=1)
    for index in range(5):
        try:
            intake.put(bag(index))
        except IngestionError:
            break
    with pytest.raises(IngestionError):
        intake.join()
    assert store.bags == [bag(0)]


def test_failure_surfaces_on_put():
    store = RecordingStore(reject=0)
    intake = Intake(store, maxsize=1)
    intake.put(bag(0))
    intake.close()
    intake._consumer.join()
    with pytest.raises(IngestionError):
        intake.put(bag(1))


def test_failure_surfaces_on_exit():
    store = RecordingStore(reject=0)
    with pytest.raises(IngestionError):
        with Intake(store) as intake:
            intake.put(bag(0))


def test_invalid_bag_rejected_by_store():
    store = EphemeralStore()
    with pytest.raises(IngestionError):
        with Intake(store) as intake:
            intake.put([(Literal("not a subject"), P, Literal("x"))])
    assert len(store) == 0
    assert list(store.match(Pattern())) == []


def test_size_is_unavailable_while_running():
    release = threading.Event()

    class BlockingStore(RecordingStore):
        def add(self, bag):
            release.wait()
            super().add(bag)

    intake = Intake(BlockingStore())
    intake.put(bag(0))
    with pytest.raises(IntakeRunning):
        intake.size
    release.set()
    assert intake.join() == 2
    assert intake.size == 2
