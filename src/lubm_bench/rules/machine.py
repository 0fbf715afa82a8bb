"""
Evaluation of compiled rules.

Variables live in the slots of a :class:`Heap`. Every literal of a rule body is evaluated by a :class:`Stream` that
reads the slots bound by earlier literals and writes the slots it binds itself. Body literals are joined as nested
loops in the order they are written, every activation of a literal gets a fresh stream.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from typing_extensions import Any, Callable, Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .parser import Atom, Constant, Program, Rule, Variable
from ..failures import (
    ArityMismatch,
    InvalidDeclaration,
    RecursiveRule,
    UnknownGoal,
    UnknownRelation,
    UnsafeVariable,
)


@dataclass(frozen=True)
class Addr:
    """
    The address of a slot as seen by one literal.
    """

    index: int
    writable: bool
    """
    Whether the literal binds this slot. Read-only slots hold a value when the literal is activated.
    """


class Heap:
    """
    The variable storage of one rule evaluation.
    """

    def __init__(self, size: int):
        self._slots: List[Any] = [None] * size

    def get(self, addr: Addr) -> Any:
        return self._slots[addr.index]

    def put(self, addr: Addr, value: Any):
        self._slots[addr.index] = value


class Stream(ABC):
    """
    Pull-based producer of bindings for one literal.
    """

    @abstractmethod
    def advance(self, heap: Heap) -> bool:
        """
        Bind the writable slots to the next solution.

        :param heap: The heap of the evaluation.
        :return: False at the end of the stream.
        """


StreamFactory = Callable[[Sequence[Addr]], Stream]


class Context:
    """
    The relations the machine can pull from, keyed by name.
    """

    def __init__(self):
        self.relations: Dict[str, StreamFactory] = {}

    def add(self, name: str, factory: StreamFactory) -> Context:
        self.relations[name] = factory
        return self


@dataclass
class CompiledLiteral:
    relation: str
    addrs: Tuple[Addr, ...]
    checks: Tuple[Tuple[Addr, Addr], ...] = ()
    """
    Pairs of slots that must hold equal values, for variables repeated within the literal.
    """


@dataclass
class CompiledRule:
    size: int
    """
    The number of heap slots.
    """
    head: Tuple[Addr, ...]
    body: Tuple[CompiledLiteral, ...]
    constants: Tuple[Tuple[Addr, Any], ...] = ()


def compile_rule(rule: Rule) -> CompiledRule:
    """
    Assign heap slots to the variables and constants of a rule.

    The first occurrence of a variable in the body binds it, all later occurrences only read it.
    """
    slots: Dict[str, int] = {}
    constants: List[Tuple[Addr, Any]] = []
    size = 0
    body = []
    for atom in rule.body:
        addrs: List[Addr] = []
        checks: List[Tuple[Addr, Addr]] = []
        bound_here: Dict[str, Addr] = {}
        for term in atom.terms:
            if isinstance(term, Constant):
                addr = Addr(size, writable=False)
                constants.append((addr, term.value))
                size += 1
            elif term.name in bound_here:
                addr = Addr(size, writable=True)
                checks.append((bound_here[term.name], Addr(addr.index, writable=False)))
                size += 1
            elif term.name in slots:
                addr = Addr(slots[term.name], writable=False)
            else:
                slots[term.name] = size
                addr = Addr(size, writable=True)
                bound_here[term.name] = Addr(size, writable=False)
                size += 1
            addrs.append(addr)
        body.append(CompiledLiteral(atom.relation, tuple(addrs), tuple(checks)))

    head = []
    for term in rule.head.terms:
        if isinstance(term, Constant):
            addr = Addr(size, writable=False)
            constants.append((addr, term.value))
            size += 1
        elif term.name not in slots:
            raise UnsafeVariable(rule.head.relation, term.name)
        else:
            addr = Addr(slots[term.name], writable=False)
        head.append(addr)
    return CompiledRule(size, tuple(head), tuple(body), tuple(constants))


@dataclass
class Machine:
    """
    Evaluates a goal relation of a program against the relations of a context.
    """

    goal: str
    rules: Dict[str, List[CompiledRule]]
    """
    The compiled rules of the goal and of every derived relation it depends on.
    """

    @classmethod
    def build(cls, goal: str, program: Program, context: Context) -> Machine:
        """
        Compile the rules a goal depends on.

        :param goal: The name of the relation to evaluate.
        :param program: The parsed rule text.
        :param context: The store-backed relations.
        :return: The machine of the goal.
        """
        arities: Dict[str, int] = {}
        for declaration in program.declarations:
            for term in declaration.terms:
                if not isinstance(term, Variable):
                    raise InvalidDeclaration(declaration.relation, term)
            if declaration.relation not in context.relations:
                raise UnknownRelation(declaration.relation)
            arities[declaration.relation] = len(declaration.terms)

        definitions: Dict[str, List[Rule]] = {}
        for rule in program.rules:
            _check_arity(arities, rule.head)
            definitions.setdefault(rule.head.relation, []).append(rule)

        for rules in definitions.values():
            for rule in rules:
                for atom in rule.body:
                    if atom.relation not in arities:
                        raise UnknownRelation(atom.relation)
                    _check_arity(arities, atom)

        if goal not in definitions:
            raise UnknownGoal(goal)

        compiled: Dict[str, List[CompiledRule]] = {}
        _compile_dependencies(goal, definitions, compiled, set())
        return cls(goal, compiled)

    def stream(self, context: Context, relation: Optional[str] = None) -> Iterator[Tuple]:
        """
        Evaluate all rules of a relation as a union.

        :param context: The store-backed relations.
        :param relation: The derived relation to evaluate, the goal by default.
        :return: The head tuple of every derivation, duplicates included.
        """
        for rule in self.rules[relation or self.goal]:
            heap = Heap(rule.size)
            for addr, value in rule.constants:
                heap.put(addr, value)
            yield from self._solve(rule, heap, 0, context)

    def _solve(
        self, rule: CompiledRule, heap: Heap, depth: int, context: Context
    ) -> Iterator[Tuple]:
        if depth == len(rule.body):
            yield tuple(heap.get(addr) for addr in rule.head)
            return
        literal = rule.body[depth]
        stream = self._open(literal, context)
        while stream.advance(heap):
            if all(heap.get(a) == heap.get(b) for a, b in literal.checks):
                yield from self._solve(rule, heap, depth + 1, context)

    def _open(self, literal: CompiledLiteral, context: Context) -> Stream:
        if literal.relation in self.rules:
            return RuleStream(self, literal.relation, literal.addrs, context)
        return context.relations[literal.relation](literal.addrs)


class RuleStream(Stream):
    """
    Stream over the derivations of a derived relation used as a body literal.
    Bound slots are applied as a filter on the head tuples.
    """

    def __init__(
        self, machine: Machine, relation: str, addrs: Sequence[Addr], context: Context
    ):
        self.machine = machine
        self.relation = relation
        self.addrs = tuple(addrs)
        self.context = context
        self._results: Optional[Iterator[Tuple]] = None
        self._bound: Tuple[Tuple[int, Any], ...] = ()

    def advance(self, heap: Heap) -> bool:
        if self._results is None:
            self._bound = tuple(
                (position, heap.get(addr))
                for position, addr in enumerate(self.addrs)
                if not addr.writable
            )
            self._results = self.machine.stream(self.context, self.relation)
        for row in self._results:
            if all(row[position] == value for position, value in self._bound):
                for addr, value in zip(self.addrs, row):
                    if addr.writable:
                        heap.put(addr, value)
                return True
        return False


def _check_arity(arities: Dict[str, int], atom: Atom):
    expected = arities.setdefault(atom.relation, len(atom.terms))
    if expected != len(atom.terms):
        raise ArityMismatch(atom.relation, expected, len(atom.terms))


def _compile_dependencies(
    relation: str,
    definitions: Dict[str, List[Rule]],
    compiled: Dict[str, List[CompiledRule]],
    visiting: Set[str],
):
    if relation in compiled:
        return
    if relation in visiting:
        raise RecursiveRule(relation)
    visiting.add(relation)
    for rule in definitions[relation]:
        for atom in rule.body:
            if atom.relation in definitions:
                _compile_dependencies(atom.relation, definitions, compiled, visiting)
    visiting.discard(relation)
    compiled[relation] = [compile_rule(rule) for rule in definitions[relation]]
