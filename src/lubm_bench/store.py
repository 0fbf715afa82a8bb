"""
Triple stores the benchmark loads into and queries from.

A store only needs two operations: adding a bag and matching a partially bound pattern.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from rdflib import BNode, Graph, URIRef
from rdflib.term import Node
from typing_extensions import Iterator, Optional

from .adapters.json_ld import Bag, Triple
from .failures import InvalidTriple

Cursor = Iterator[Triple]
"""
Yields the matches of a pattern one at a time until exhausted.
"""


@dataclass(frozen=True)
class Pattern:
    """
    Equality constraints on the positions of a triple. A position that is None is free.
    """

    subject: Optional[Node] = None
    predicate: Optional[Node] = None
    object: Optional[Node] = None


class TripleStore(ABC):

    @abstractmethod
    def add(self, bag: Bag) -> None:
        """
        Insert all triples of a bag.

        :param bag: The triples to insert.
        :raises StoreError: If the bag is rejected.
        """

    @abstractmethod
    def match(self, pattern: Pattern) -> Cursor:
        """
        :param pattern: The constraints the triples have to satisfy.
        :return: A cursor over the matching triples.
        """

    @abstractmethod
    def __len__(self) -> int: ...


class EphemeralStore(TripleStore):
    """
    In-memory store backed by an rdflib graph. Triples are unique.
    """

    def __init__(self):
        self.graph = Graph()

    def add(self, bag: Bag) -> None:
        for triple in bag:
            self._validate(triple)
        for triple in bag:
            self.graph.add(triple)

    @staticmethod
    def _validate(triple: Triple):
        if not isinstance(triple, tuple) or len(triple) != 3:
            raise InvalidTriple(triple, "a triple needs exactly three terms")
        s, p, o = triple
        if not isinstance(s, (URIRef, BNode)):
            raise InvalidTriple(triple, "the subject must be an IRI or a blank node")
        if not isinstance(p, URIRef):
            raise InvalidTriple(triple, "the predicate must be an IRI")
        if not isinstance(o, Node):
            raise InvalidTriple(triple, "the object must be an RDF term")

    def match(self, pattern: Pattern) -> Cursor:
        return self.graph.triples((pattern.subject, pattern.predicate, pattern.object))

    def __len__(self) -> int:
        return len(self.graph)
