"""
This module defines the custom exception types used by the lubm_bench package.

Generation and ingestion failures are structural: the dataset cannot be trusted anymore and the run has to halt.
Rule failures are local to one query.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from typing_extensions import Any


@dataclass
class DataclassException(Exception):
    """
    Base class of all errors of the package.
    Subclasses declare their context as fields and compose `message` from them in `__post_init__`.
    """

    message: str = field(kw_only=True, default=None)

    def __post_init__(self):
        super().__init__(self.message)


@dataclass
class InvalidConfiguration(DataclassException):
    """
    Raised when a generator parameter is outside its allowed bounds.
    """

    parameter: str
    """
    The name of the offending configuration parameter.
    """
    reason: str

    def __post_init__(self):
        self.message = f"Invalid configuration for '{self.parameter}': {self.reason}"
        super().__post_init__()


@dataclass
class UnknownPrefix(DataclassException):
    """
    Raised when a CURIE uses a prefix that is not part of the JSON-LD context.
    """

    curie: str

    def __post_init__(self):
        self.message = f"Unknown prefix in '{self.curie}'"
        super().__post_init__()


@dataclass
class GenerationError(DataclassException):
    """
    Base class for errors that abort a generation run.
    """


@dataclass
class SerializationError(GenerationError):
    """
    Raised when an entity cannot be rendered as a JSON-LD document or the document cannot be converted into a bag.
    """

    reason: str

    def __post_init__(self):
        self.message = f"Serialization failed: {self.reason}"
        super().__post_init__()


@dataclass
class UniversityIndexOutOfRange(GenerationError):
    """
    Raised when a university is requested outside of the configured unit range.
    """

    index: int
    max_university_id: int

    def __post_init__(self):
        self.message = (
            f"University index {self.index} is outside of [0, {self.max_university_id})"
        )
        super().__post_init__()


@dataclass
class StoreError(DataclassException):
    """
    Base class for errors raised by a triple store.
    """


@dataclass
class InvalidTriple(StoreError):
    """
    Raised when a bag contains a triple that cannot be stored.
    """

    triple: Any
    reason: str

    def __post_init__(self):
        self.message = f"Invalid triple {self.triple}: {self.reason}"
        super().__post_init__()


@dataclass
class IngestionError(DataclassException):
    """
    Raised on the producer side when the ingestion consumer failed to insert a bag into the store.
    """

    reason: str

    def __post_init__(self):
        self.message = f"Ingestion failed: {self.reason}"
        super().__post_init__()


@dataclass
class RuleError(DataclassException):
    """
    Base class for errors that prevent a single query from being built.
    """


@dataclass
class RuleSyntaxError(RuleError):
    """
    Raised when a rule text cannot be parsed.
    """

    line: int
    column: int
    reason: str

    def __post_init__(self):
        self.message = f"Syntax error at line {self.line}, column {self.column}: {self.reason}"
        super().__post_init__()


@dataclass
class InvalidDeclaration(RuleError):
    """
    Raised when a fact declaration contains something else than variables.
    """

    relation: str
    term: Any

    def __post_init__(self):
        self.message = f"Declaration of '{self.relation}' may only contain variables, got {self.term}"
        super().__post_init__()


@dataclass
class UnknownRelation(RuleError):
    """
    Raised when a literal references a relation that is neither declared and registered in the context
    nor defined by a rule.
    """

    relation: str

    def __post_init__(self):
        self.message = f"Unknown relation '{self.relation}'"
        super().__post_init__()


@dataclass
class UnknownGoal(RuleError):
    """
    Raised when no rule defines the requested goal.
    """

    goal: str

    def __post_init__(self):
        self.message = f"No rule defines the goal '{self.goal}'"
        super().__post_init__()


@dataclass
class ArityMismatch(RuleError):
    """
    Raised when a relation is used with a different number of terms than it was defined with.
    """

    relation: str
    expected: int
    found: int

    def __post_init__(self):
        self.message = (
            f"Relation '{self.relation}' expects {self.expected} terms, found {self.found}"
        )
        super().__post_init__()


@dataclass
class UnsafeVariable(RuleError):
    """
    Raised when a head variable of a rule does not occur in its body.
    """

    relation: str
    variable: str

    def __post_init__(self):
        self.message = f"Variable '{self.variable}' of '{self.relation}' does not occur in the rule body"
        super().__post_init__()


@dataclass
class RecursiveRule(RuleError):
    """
    Raised when a derived relation depends on itself.
    """

    relation: str

    def __post_init__(self):
        self.message = f"Relation '{self.relation}' is recursive"
        super().__post_init__()


@dataclass
class IntakeRunning(DataclassException):
    """
    Raised when the triple count of an intake is read before its consumer finished.
    """

    def __post_init__(self):
        self.message = "The intake is still running, join it first"
        super().__post_init__()
