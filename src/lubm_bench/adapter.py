"""
Bridge between the pull-based binding protocol of the rule machine and the pattern match of a triple store.

One :class:`Bridge` serves exactly one literal `f(S, P, O)` of one rule activation. It does no joins: the machine
sequences the bridges of a rule body.
"""

from __future__ import annotations

from enum import Enum, auto

from typing_extensions import Optional, Sequence

from .failures import ArityMismatch
from .rules.machine import Addr, Heap, Stream, StreamFactory
from .store import Cursor, Pattern, TripleStore


class BridgeState(Enum):
    UNINITIALIZED = auto()
    ACTIVE = auto()
    EXHAUSTED = auto()
    """
    The cursor reported its end. A bridge is not restartable.
    """


class Bridge(Stream):
    """
    Stream of the matches of one triple pattern.

    Read-only slots are the bound positions of the pattern, they are read once when the bridge is activated.
    Writable slots are the free positions, they are overwritten with every match.
    """

    def __init__(self, addrs: Sequence[Addr], store: TripleStore):
        """
        :param addrs: The slots of the subject, predicate and object.
        :param store: The store to match against.
        """
        if len(addrs) != 3:
            raise ArityMismatch("triple pattern", 3, len(addrs))
        self.addrs = tuple(addrs)
        self.store = store
        self.state = BridgeState.UNINITIALIZED
        self._cursor: Optional[Cursor] = None

    def advance(self, heap: Heap) -> bool:
        if self.state is BridgeState.EXHAUSTED:
            return False
        if self.state is BridgeState.UNINITIALIZED:
            self._open(heap)

        triple = next(self._cursor, None)
        if triple is None:
            self.state = BridgeState.EXHAUSTED
            self._cursor = None
            return False

        for addr, value in zip(self.addrs, triple):
            if addr.writable:
                heap.put(addr, value)
        return True

    def _open(self, heap: Heap):
        subject, predicate, object_ = (
            None if addr.writable else heap.get(addr) for addr in self.addrs
        )
        self._cursor = iter(self.store.match(Pattern(subject, predicate, object_)))
        self.state = BridgeState.ACTIVE


def stream(store: TripleStore) -> StreamFactory:
    """
    :param store: The store backing the relation.
    :return: The factory the machine calls for every activation of a literal of the relation.
    """

    def factory(addrs: Sequence[Addr]) -> Bridge:
        return Bridge(addrs, store)

    return factory
