"""
The records of the university model.

Every record is a dataclass whose fields carry their JSON-LD key in the field metadata.
:meth:`Entity.to_json` uses these keys to render the wire document.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum

from typing_extensions import Any, Dict, List, Optional

from .identifiers import UID, IRI


def _key(name: str, **kwargs):
    return field(metadata={"key": name}, **kwargs)


@dataclass
class Entity:
    """
    Base class of all generated records.
    """

    id: UID = _key("@id")
    """
    The identifier this record owns.
    """

    type: UID = _key("@type")
    """
    The class of the record as a CURIE, e.g. `ub:University`.
    """

    def to_json(self) -> Dict[str, Any]:
        """
        Render the record as a JSON-LD node object.
        Unset optional fields are left out, identifiers and references are rendered by the encoder.

        :return: A dictionary keyed by the JSON-LD keys of the fields.
        """
        document = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            document[f.metadata["key"]] = value
        return document


@dataclass
class University(Entity):
    name: str = _key("ub:name", default=None)


@dataclass
class Department(Entity):
    name: str = _key("ub:name", default=None)
    sub_organization_of: IRI = _key("ub:subOrganizationOf", default=None)


@dataclass
class ResearchGroup(Entity):
    sub_organization_of: IRI = _key("ub:subOrganizationOf", default=None)


@dataclass
class Course(Entity):
    """
    A course or graduate course, distinguished by the type.
    """

    name: str = _key("ub:name", default=None)


@dataclass
class Faculty(Entity):
    """
    A professor or lecturer of a department.
    Degrees and taught courses are filled in during the department pass before the faculty is written.
    """

    name: str = _key("ub:name", default=None)
    works_for: IRI = _key("ub:worksFor", default=None)
    email_address: str = _key("ub:emailAddress", default=None)
    telephone: str = _key("ub:telephone", default=None)
    research_interest: str = _key("ub:researchInterest", default=None)
    teacher_of: List[IRI] = _key("ub:teacherOf", default_factory=list)
    head_of: Optional[IRI] = _key("ub:headOf", default=None)
    undergraduate_degree_from: Optional[IRI] = _key(
        "ub:undergraduateDegreeFrom", default=None
    )
    masters_degree_from: Optional[IRI] = _key("ub:mastersDegreeFrom", default=None)
    doctoral_degree_from: Optional[IRI] = _key("ub:doctoralDegreeFrom", default=None)


@dataclass
class Student(Entity):
    """
    An undergraduate or graduate student, distinguished by the type.
    Only graduate students get an undergraduate degree or a teaching assistant position.
    """

    name: str = _key("ub:name", default=None)
    member_of: IRI = _key("ub:memberOf", default=None)
    email_address: str = _key("ub:emailAddress", default=None)
    telephone: str = _key("ub:telephone", default=None)
    takes_course: List[IRI] = _key("ub:takesCourse", default_factory=list)
    undergraduate_degree_from: Optional[IRI] = _key(
        "ub:undergraduateDegreeFrom", default=None
    )
    advisor: Optional[IRI] = _key("ub:advisor", default=None)
    teaching_assistant_of: Optional[IRI] = _key("ub:teachingAssistantOf", default=None)


@dataclass
class Publication(Entity):
    name: str = _key("ub:name", default=None)
    publication_author: List[IRI] = _key("ub:publicationAuthor", default_factory=list)


class FacultyTier(Enum):
    """
    The ranks of the faculty of a department, in the order they are generated.
    """

    FULL = "FullProfessor"
    ASSOCIATE = "AssociateProfessor"
    ASSISTANT = "AssistantProfessor"
    LECTURER = "Lecturer"

    @property
    def type(self) -> UID:
        return UID(f"ub:{self.value}")

    @property
    def is_professor(self) -> bool:
        """
        Only professors may advise students.
        """
        return self is not FacultyTier.LECTURER
