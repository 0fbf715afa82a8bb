"""
Parser of the rule language.

The grammar lives in `grammar.lark`. Constants are expanded to rdflib terms while parsing, so compiled rules compare
them directly against the values of the store.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedInput, VisitError
from rdflib import Literal
from rdflib.term import Node
from typing_extensions import List, Tuple, Union

from ..failures import RuleError, RuleSyntaxError, UnknownPrefix
from ..identifiers import expand


@dataclass(frozen=True)
class Variable:
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Constant:
    value: Node

    def __str__(self):
        return self.value.n3()


Term = Union[Variable, Constant]


@dataclass(frozen=True)
class Atom:
    relation: str
    terms: Tuple[Term, ...]

    def __str__(self):
        return f"{self.relation}({', '.join(map(str, self.terms))})"


@dataclass(frozen=True)
class Rule:
    head: Atom
    body: Tuple[Atom, ...]

    def __str__(self):
        return f"{self.head} :- {', '.join(map(str, self.body))}."


@dataclass
class Program:
    declarations: List[Atom] = field(default_factory=list)
    """
    The relations that are served by the context, e.g. `f(s, p, o).`
    """
    rules: List[Rule] = field(default_factory=list)


class RuleTransformer(Transformer):
    """Transform the lark parse tree into a :class:`Program`."""

    def start(self, items):
        program = Program()
        for item in items:
            if isinstance(item, Rule):
                program.rules.append(item)
            else:
                program.declarations.append(item)
        return program

    def declaration(self, items):
        return items[0]

    def rule(self, items):
        return Rule(head=items[0], body=tuple(items[1:]))

    def atom(self, items):
        name, terms = items
        return Atom(str(name), tuple(terms or ()))

    def terms(self, items):
        return list(items)

    def variable(self, items):
        return Variable(str(items[0]))

    def curie(self, items):
        return Constant(self._expand(items[0], str(items[0])))

    def iri(self, items):
        return Constant(self._expand(items[0], str(items[0])[1:-1]))

    def string(self, items):
        token = items[0]
        try:
            return Constant(Literal(json.loads(token)))
        except ValueError as exc:
            raise RuleSyntaxError(
                token.line, token.column, f"invalid string {token}: {exc}"
            ) from exc

    @staticmethod
    def _expand(token: Token, curie: str) -> Node:
        try:
            return expand(curie)
        except UnknownPrefix as exc:
            raise RuleSyntaxError(token.line, token.column, str(exc)) from exc


_PARSER = None
_TRANSFORMER = RuleTransformer()


def _get_parser() -> Lark:
    """Get or create the Lark parser (lazy initialization)."""
    global _PARSER
    if _PARSER is None:
        _PARSER = Lark.open("grammar.lark", rel_to=__file__, parser="lalr")
    return _PARSER


def parse(text: str) -> Program:
    """
    Parse a rule text.

    :param text: Declarations and rules, e.g. `f(s, p, o). q(x) :- f(x, rdf:type, ub:Course).`
    :return: The parsed program.
    :raises RuleSyntaxError: If the text is not a valid program.
    """
    try:
        tree = _get_parser().parse(text)
    except UnexpectedInput as exc:
        raise RuleSyntaxError(
            getattr(exc, "line", -1), getattr(exc, "column", -1), str(exc).strip()
        ) from exc
    try:
        return _TRANSFORMER.transform(tree)
    except VisitError as exc:
        if isinstance(exc.orig_exc, RuleError):
            raise exc.orig_exc from exc
        raise RuleSyntaxError(-1, -1, str(exc.orig_exc)) from exc
