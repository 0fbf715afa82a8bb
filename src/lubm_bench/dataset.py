from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass, field

from typing_extensions import Callable, Dict, List, TypeVar, Union

from . import logger
from .adapters.json_ld import Bag, to_bag, to_json
from .configuration import GeneratorConfiguration, Range
from .failures import UniversityIndexOutOfRange
from .identifiers import IRI, UID, university_id
from .model import (
    Course,
    Department,
    Entity,
    Faculty,
    FacultyTier,
    Publication,
    ResearchGroup,
    Student,
    University,
)

TEntity = TypeVar("TEntity", bound=Entity)

Writer = Callable[[Bag], None]
"""
Receives the bag of every written document, e.g. :meth:`Intake.put`.
"""

RESEARCH_AREAS = 30
"""
The number of distinct research interests of the faculty.
"""


@dataclass
class DataSet:
    """
    Generates the universities of the LUBM benchmark and writes them as bags.

    All randomness of a run comes from one random source seeded with `seed`, so the same seed and the same
    universities produce the same sequence of bags.
    See http://swat.cse.lehigh.edu/projects/lubm/profile.htm
    """

    seed: int
    max_university_id: int
    """
    The number of universities of the run. Degrees may come from any of them, generated or not.
    """
    writer: Writer
    configuration: GeneratorConfiguration = field(
        default_factory=GeneratorConfiguration
    )
    statistics: Counter = field(default_factory=Counter, init=False)
    """
    The number of written records per type.
    """
    rng: random.Random = field(init=False, repr=False)

    def __post_init__(self):
        self.rng = random.Random(self.seed)

    def write(self, obj: Union[Entity, List[Entity]]):
        """
        Serialize a record or a batch of records and hand the resulting bag to the writer.

        :param obj: The record or the batch.
        :raises SerializationError: If the document cannot be built.
        """
        bag = to_bag(to_json(obj))
        self.writer(bag)
        for entity in obj if isinstance(obj, list) else [obj]:
            self.statistics[str(entity.type)] += 1

    def generate(self, university_index: int):
        """
        Generate one university with all its departments.
        Departments are written one after another, each one completely before the next one starts.

        :param university_index: The index of the university in [0, max_university_id).
        """
        if not 0 <= university_index < self.max_university_id:
            raise UniversityIndexOutOfRange(university_index, self.max_university_id)

        university = University(
            id=university_id(university_index),
            type=UID("ub:University"),
            name=f"University{university_index}",
        )
        self.write(university)

        # 15~25 Departments are subOrganization of the University
        for index in range(self.configuration.departments.draw(self.rng)):
            name = f"Department{index}"
            department = Department(
                id=university.id.child(".", name),
                type=UID("ub:Department"),
                name=name,
                sub_organization_of=university.id.reference(),
            )
            self.write(department)
            self._generate_department(department, f"{name}.{university.name}.edu")

        logger.info(
            f"Generated {university.name}: {sum(self.statistics.values())} records so far"
        )

    def _generate_department(self, department: Department, domain: str):
        configuration = self.configuration

        tier_sizes = {
            FacultyTier.FULL: configuration.full_professors,
            FacultyTier.ASSOCIATE: configuration.associate_professors,
            FacultyTier.ASSISTANT: configuration.assistant_professors,
            FacultyTier.LECTURER: configuration.lecturers,
        }
        tiers: Dict[FacultyTier, List[Faculty]] = {
            tier: [
                self._new_faculty(tier, index, department, domain)
                for index in range(size.draw(self.rng))
            ]
            for tier, size in tier_sizes.items()
        }
        faculty = [member for members in tiers.values() for member in members]
        advisors = [
            member
            for tier, members in tiers.items()
            if tier.is_professor
            for member in members
        ]

        # one of the FullProfessors is headOf the Department
        self.rng.choice(tiers[FacultyTier.FULL]).head_of = department.id.reference()

        for member in faculty:
            member.undergraduate_degree_from = self._degree_from()
            member.masters_degree_from = self._degree_from()
            member.doctoral_degree_from = self._degree_from()

        # UndergraduateStudent : Faculty = 8~14 : 1
        undergraduate_students: List[Student] = []
        for _ in faculty:
            for _ in range(configuration.undergraduate_students_per_faculty.draw(self.rng)):
                undergraduate_students.append(
                    self._new_student(
                        "UndergraduateStudent",
                        len(undergraduate_students),
                        department,
                        domain,
                    )
                )

        # 1/5 of the UndergraduateStudents have a Professor as their advisor
        for student in self._fraction(
            undergraduate_students, configuration.advised_undergraduate_students
        ):
            student.advisor = self._reference(advisors)

        # GraduateStudent : Faculty = 3~4 : 1, each with an advisor and an undergraduate degree
        graduate_students: List[Student] = []
        for _ in faculty:
            for _ in range(configuration.graduate_students_per_faculty.draw(self.rng)):
                student = self._new_student(
                    "GraduateStudent", len(graduate_students), department, domain
                )
                student.undergraduate_degree_from = self._degree_from()
                student.advisor = self._reference(advisors)
                graduate_students.append(student)

        courses = self._teach(faculty, "Course", configuration.courses_per_faculty, department)
        for student in undergraduate_students:
            student.takes_course = self._takes_course(
                configuration.courses_per_undergraduate_student, courses
            )

        graduate_courses = self._teach(
            faculty, "GraduateCourse", configuration.graduate_courses_per_faculty, department
        )
        for student in graduate_students:
            student.takes_course = self._takes_course(
                configuration.graduate_courses_per_graduate_student, graduate_courses
            )

        # 1/5~1/4 of the GraduateStudents are TeachingAssistant for one Course
        if courses:
            for student in self._fraction(
                graduate_students, configuration.teaching_assistants.draw(self.rng)
            ):
                student.teaching_assistant_of = self._reference(courses)

        publication_counts = {
            FacultyTier.FULL: configuration.full_professor_publications,
            FacultyTier.ASSOCIATE: configuration.associate_professor_publications,
            FacultyTier.ASSISTANT: configuration.assistant_professor_publications,
            FacultyTier.LECTURER: configuration.lecturer_publications,
        }
        publications: List[Publication] = []
        for tier, count in publication_counts.items():
            for author in tiers[tier]:
                for _ in range(count.draw(self.rng)):
                    publications.append(
                        self._new_publication(len(publications), department, author)
                    )

        # every GraduateStudent co-authors 0~5 Publications with some Professors
        if publications:
            for student in graduate_students:
                picks = configuration.co_authored_publications.draw(self.rng)
                for publication in self._dedupe(
                    self.rng.choice(publications) for _ in range(picks)
                ):
                    publication.publication_author.append(student.id.reference())

        research_groups = [
            ResearchGroup(
                id=department.id.child("/", f"ResearchGroup{index}"),
                type=UID("ub:ResearchGroup"),
                sub_organization_of=department.id.reference(),
            )
            for index in range(configuration.research_groups.draw(self.rng))
        ]

        self.write(faculty)
        self.write(undergraduate_students)
        self.write(graduate_students)
        self.write(courses)
        self.write(graduate_courses)
        self.write(publications)
        self.write(research_groups)

    def _teach(
        self, faculty: List[Faculty], kind: str, count: Range, department: Department
    ) -> List[Course]:
        """
        Create the courses of a kind, every faculty member is teacherOf its own ones.
        """
        courses: List[Course] = []
        for member in faculty:
            for _ in range(count.draw(self.rng)):
                name = f"{kind}{len(courses)}"
                course = Course(
                    id=department.id.child("/", name), type=UID(f"ub:{kind}"), name=name
                )
                member.teacher_of.append(course.id.reference())
                courses.append(course)
        return courses

    def _takes_course(self, count: Range, courses: List[Course]) -> List[IRI]:
        if not courses:
            return []
        picks = self.rng.sample(courses, min(count.draw(self.rng), len(courses)))
        return [course.id.reference() for course in picks]

    def _fraction(self, pool: List[TEntity], denominator: int) -> List[TEntity]:
        """
        Select about 1/denominator of the pool.
        The picks are drawn with replacement and deduplicated, so the selection may be smaller.
        """
        if not pool:
            return []
        return self._dedupe(
            self.rng.choice(pool) for _ in range(len(pool) // denominator)
        )

    @staticmethod
    def _dedupe(entities) -> List[TEntity]:
        return list({entity.id: entity for entity in entities}.values())

    def _reference(self, pool: List[Entity]) -> IRI:
        return self.rng.choice(pool).id.reference()

    def _degree_from(self) -> IRI:
        return university_id(self.rng.randrange(self.max_university_id)).reference()

    def _telephone(self) -> str:
        return "-".join(f"{self.rng.randrange(1000):03d}" for _ in range(3))

    def _new_faculty(
        self, tier: FacultyTier, index: int, department: Department, domain: str
    ) -> Faculty:
        name = f"{tier.value}{index}"
        return Faculty(
            id=department.id.child("/", name),
            type=tier.type,
            name=name,
            works_for=department.id.reference(),
            email_address=f"{name}@{domain}",
            telephone=self._telephone(),
            research_interest=f"Research{self.rng.randrange(RESEARCH_AREAS)}",
        )

    def _new_student(
        self, kind: str, index: int, department: Department, domain: str
    ) -> Student:
        name = f"{kind}{index}"
        return Student(
            id=department.id.child("/", name),
            type=UID(f"ub:{kind}"),
            name=name,
            member_of=department.id.reference(),
            email_address=f"{name}@{domain}",
            telephone=self._telephone(),
        )

    @staticmethod
    def _new_publication(
        index: int, department: Department, author: Faculty
    ) -> Publication:
        name = f"Publication{index}"
        return Publication(
            id=department.id.child("/", f"{author.name}/{name}"),
            type=UID("ub:Publication"),
            name=name,
            publication_author=[author.id.reference()],
        )
