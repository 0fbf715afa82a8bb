"""
The ingestion pipeline between the generator and the store.

The generator is the single producer of a bounded queue. A dedicated consumer thread is the only caller of
:meth:`TripleStore.add`, so the store never sees concurrent writers.
"""

from __future__ import annotations

import queue
import threading

from typing_extensions import Optional

from . import logger
from .adapters.json_ld import Bag
from .failures import IngestionError, IntakeRunning
from .store import TripleStore

_END_OF_STREAM = object()


class Intake:
    """
    Bounded single-consumer queue that drains bags into a store.

    Usage::

        with Intake(store) as intake:
            intake.put(bag)
        size = intake.size
    """

    def __init__(self, store: TripleStore, maxsize: int = 64):
        """
        :param store: The store the consumer inserts into.
        :param maxsize: The capacity of the queue. The producer blocks while the queue is full.
        """
        self.store = store
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._size = 0
        self._failure: Optional[Exception] = None
        self._closed = False
        self._consumer = threading.Thread(
            target=self._consume, name="lubm-intake", daemon=True
        )
        self._consumer.start()

    def _consume(self):
        while True:
            bag = self._queue.get()
            if bag is _END_OF_STREAM:
                return
            # after a failure the queue is still drained, the producer must never block forever
            if self._failure is not None:
                continue
            try:
                self.store.add(bag)
            except Exception as exc:
                logger.error(f"Store rejected a bag of {len(bag)} triples: {exc}")
                self._failure = exc
                continue
            self._size += len(bag)

    def put(self, bag: Bag):
        """
        Hand a bag over to the consumer, blocking while the queue is full.

        :param bag: The bag to ingest.
        :raises IngestionError: If the consumer already failed to ingest an earlier bag.
        """
        self._raise_on_failure()
        self._queue.put(bag)

    def close(self):
        """
        Signal the consumer that no more bags follow.
        """
        if not self._closed:
            self._closed = True
            self._queue.put(_END_OF_STREAM)

    def join(self) -> int:
        """
        Close the queue and wait until the consumer has drained it.

        :return: The number of ingested triples.
        :raises IngestionError: If any bag was rejected by the store.
        """
        self.close()
        self._consumer.join()
        self._raise_on_failure()
        return self._size

    @property
    def size(self) -> int:
        """
        The number of ingested triples, only available once the consumer finished.

        :raises IntakeRunning: If the consumer is still draining the queue.
        """
        if self._consumer.is_alive():
            raise IntakeRunning()
        return self._size

    def _raise_on_failure(self):
        if self._failure is not None:
            raise IngestionError(str(self._failure)) from self._failure

    def __enter__(self) -> Intake:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        self._consumer.join()
        if exc_type is None:
            self._raise_on_failure()
