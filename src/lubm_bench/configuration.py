from __future__ import annotations

import random
from dataclasses import dataclass, field, fields

from omegaconf import OmegaConf
from typing_extensions import Optional, Sequence

from .failures import InvalidConfiguration


@dataclass
class Range:
    """
    Inclusive bounds of a random count.
    """

    min: int
    max: int

    def draw(self, rng: random.Random) -> int:
        """
        :param rng: The random source of the generation run.
        :return: A uniformly drawn integer in [min, max].
        """
        return rng.randint(self.min, self.max)


@dataclass
class GeneratorConfiguration:
    """Configuration of the LUBM data generator.

    The defaults follow the LUBM profile, see http://swat.cse.lehigh.edu/projects/lubm/profile.htm
    """

    departments: Range = field(default_factory=lambda: Range(15, 25))
    """
    The min/max number of departments per university.
    """

    full_professors: Range = field(default_factory=lambda: Range(7, 10))
    """
    The min/max number of full professors per department.
    One of these professors is the head of the department.
    """

    associate_professors: Range = field(default_factory=lambda: Range(10, 14))
    """
    The min/max number of associate professors per department.
    """

    assistant_professors: Range = field(default_factory=lambda: Range(8, 11))
    """
    The min/max number of assistant professors per department.
    """

    lecturers: Range = field(default_factory=lambda: Range(5, 7))
    """
    The min/max number of lecturers per department.
    """

    undergraduate_students_per_faculty: Range = field(
        default_factory=lambda: Range(8, 14)
    )
    graduate_students_per_faculty: Range = field(default_factory=lambda: Range(3, 4))

    courses_per_faculty: Range = field(default_factory=lambda: Range(1, 2))
    graduate_courses_per_faculty: Range = field(default_factory=lambda: Range(1, 2))

    courses_per_undergraduate_student: Range = field(
        default_factory=lambda: Range(2, 4)
    )
    graduate_courses_per_graduate_student: Range = field(
        default_factory=lambda: Range(1, 3)
    )

    advised_undergraduate_students: int = 5
    """
    Denominator of the fraction of undergraduate students that get an advisor (1/5).
    """

    teaching_assistants: Range = field(default_factory=lambda: Range(4, 5))
    """
    The min/max denominator of the fraction of graduate students that assist a course (1/5 ~ 1/4).
    """

    full_professor_publications: Range = field(default_factory=lambda: Range(15, 20))
    associate_professor_publications: Range = field(
        default_factory=lambda: Range(10, 18)
    )
    assistant_professor_publications: Range = field(
        default_factory=lambda: Range(5, 10)
    )
    lecturer_publications: Range = field(default_factory=lambda: Range(0, 5))

    co_authored_publications: Range = field(default_factory=lambda: Range(0, 5))
    """
    The min/max number of publication picks a graduate student co-authors.
    """

    research_groups: Range = field(default_factory=lambda: Range(10, 30))
    """
    The min/max number of research groups per department.
    """

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Range):
                if value.min < 0:
                    raise InvalidConfiguration(f.name, "the minimum must not be negative")
                if value.min > value.max:
                    raise InvalidConfiguration(
                        f.name, f"the minimum {value.min} exceeds the maximum {value.max}"
                    )
        if self.full_professors.min < 1:
            raise InvalidConfiguration(
                "full_professors", "every department needs a full professor as head"
            )
        if self.advised_undergraduate_students < 1:
            raise InvalidConfiguration(
                "advised_undergraduate_students", "the denominator must be positive"
            )
        if self.teaching_assistants.min < 1:
            raise InvalidConfiguration(
                "teaching_assistants", "the denominator must be positive"
            )


@dataclass
class BenchmarkConfiguration:
    """
    Parameters of one benchmark run.
    Every field can be overridden from the command line with `key=value`, e.g. `universities=5`.
    """

    universities: int = 1
    """
    The number of universities to generate.
    """

    seed: int = 1683234740
    """
    The seed of the single random source of the generation run.
    """

    queue_size: int = 64
    """
    The capacity of the ingestion queue.
    """

    repetitions: int = 1
    """
    How often every query is evaluated.
    """

    generator: GeneratorConfiguration = field(default_factory=GeneratorConfiguration)


def load_configuration(argv: Optional[Sequence[str]] = None) -> BenchmarkConfiguration:
    """
    Merge the structured defaults with dotlist overrides.

    :param argv: Overrides like `universities=2` or `generator.departments.max=16`.
    :return: The validated configuration.
    """
    schema = OmegaConf.structured(BenchmarkConfiguration)
    overrides = OmegaConf.from_dotlist(list(argv or []))
    return OmegaConf.to_object(OmegaConf.merge(schema, overrides))
