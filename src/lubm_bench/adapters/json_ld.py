"""
Conversion of records into JSON-LD documents and of JSON-LD documents into bags of triples.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from rdflib import Graph
from rdflib.term import Node
from typing_extensions import Any, Callable, Dict, List, Tuple, Type

from ..failures import SerializationError
from ..identifiers import CONTEXT, IRI, UID

Triple = Tuple[Node, Node, Node]
Bag = List[Triple]
"""
The triples produced from one written document.
"""


@dataclass
class TypeRegistry:
    """Registry of custom serializers, keyed by the exact type of the value."""

    _serializers: Dict[Type, Callable[[Any], Any]] = field(default_factory=dict)

    def register(self, type_class: Type, serializer: Callable[[Any], Any]):
        """
        Register a custom serializer for a type.

        :param type_class: The type to register
        :param serializer: Function to serialize instances of the type
        """
        self._serializers[type_class] = serializer

    def get_serializer(self, obj: Any) -> Callable[[Any], Any] | None:
        """
        :param obj: The object to get the serializer for
        :return: The serializer function or None if not registered
        """
        return self._serializers.get(type(obj))


class JSONLDEncoder(json.JSONEncoder):
    """
    Encoder for records, identifiers and references.
    """

    def default(self, obj):
        serializer = REGISTRY.get_serializer(obj)
        if serializer:
            return serializer(obj)

        # records are duck-typed by their to_json method
        if hasattr(obj, "to_json"):
            return obj.to_json()

        return json.JSONEncoder.default(self, obj)


def to_json(obj: Any) -> str:
    """
    Serialize a record or a list of records to a JSON-LD document.

    :param obj: The object to serialize
    :return: The JSON string
    """
    try:
        return json.dumps(obj, cls=JSONLDEncoder)
    except (TypeError, ValueError) as exc:
        raise SerializationError(str(exc)) from exc


def to_bag(document: str) -> Bag:
    """
    Convert a JSON-LD document into the triples it describes.

    :param document: A node object or an array of node objects.
    :return: The triples of the document.
    """
    graph = Graph()
    try:
        graph.parse(data=document, format="json-ld", context=CONTEXT)
    except Exception as exc:
        raise SerializationError(f"invalid JSON-LD document: {exc}") from exc
    return list(graph)


def serialize_uid(obj: UID) -> str:
    return obj.value


def serialize_iri(obj: IRI) -> Dict[str, str]:
    return {"@id": obj.value}


REGISTRY = TypeRegistry()
REGISTRY.register(UID, serialize_uid)
REGISTRY.register(IRI, serialize_iri)
