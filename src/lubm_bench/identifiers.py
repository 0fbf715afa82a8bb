"""
Hierarchical CURIE identifiers of the generated records.

A record owns exactly one :class:`UID`. Every pointer to another record is an :class:`IRI`, which serializes as a
linked-data reference instead of a plain value.
"""

from __future__ import annotations

from dataclasses import dataclass

from rdflib import Graph, Namespace, RDF, URIRef
from rdflib.namespace import NamespaceManager
from typing_extensions import Dict

from .failures import UnknownPrefix

EDU = Namespace("http://www.lehigh.edu/lubm/")
"""
Namespace of the generated instances.
"""

UB = Namespace("http://swat.cse.lehigh.edu/onto/univ-bench.owl#")
"""
Namespace of the univ-bench ontology.
"""

CONTEXT: Dict[str, str] = {
    "edu": str(EDU),
    "ub": str(UB),
    "rdf": str(RDF),
}
"""
The JSON-LD context shared by the encoder and the rule language.
"""

_namespace_manager = NamespaceManager(Graph(), bind_namespaces="core")
for _prefix, _namespace in CONTEXT.items():
    _namespace_manager.bind(_prefix, _namespace, override=True)


@dataclass(frozen=True)
class UID:
    """
    The identifier a record owns.
    """

    value: str

    def child(self, separator: str, local_name: str) -> UID:
        """
        :param separator: The separator between this identifier and the local name.
        :param local_name: The type qualified name of the child, e.g. `Course3`.
        :return: The identifier of a record that lives below this one.
        """
        return UID(f"{self.value}{separator}{local_name}")

    def reference(self) -> IRI:
        """
        :return: A pointer to this identifier.
        """
        return IRI(self.value)

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class IRI:
    """
    A reference to the identifier of another, possibly not generated, record.
    """

    value: str

    def __str__(self):
        return self.value


def university_id(index: int) -> UID:
    return UID(f"edu:University{index}")


def expand(curie: str) -> URIRef:
    """
    Expand a CURIE of the shared context into a full IRI.

    :param curie: A compact identifier like `ub:Course` or an absolute IRI.
    :return: The expanded IRI.
    """
    if "://" in curie:
        return URIRef(curie)
    try:
        return _namespace_manager.expand_curie(curie)
    except ValueError as exc:
        raise UnknownPrefix(curie) from exc
