import pytest

from lubm_bench.benchmark import load
from lubm_bench.configuration import (
    BenchmarkConfiguration,
    GeneratorConfiguration,
    Range,
)
from lubm_bench.store import EphemeralStore


def small_generator_configuration() -> GeneratorConfiguration:
    """
    A generator configuration that keeps every department small but still exercises every relation.
    """
    return GeneratorConfiguration(
        departments=Range(2, 3),
        full_professors=Range(1, 2),
        associate_professors=Range(1, 2),
        assistant_professors=Range(1, 2),
        lecturers=Range(1, 1),
        undergraduate_students_per_faculty=Range(2, 3),
        graduate_students_per_faculty=Range(1, 2),
        full_professor_publications=Range(1, 3),
        associate_professor_publications=Range(1, 2),
        assistant_professor_publications=Range(0, 2),
        lecturer_publications=Range(0, 1),
        research_groups=Range(1, 2),
    )


@pytest.fixture
def generator_configuration() -> GeneratorConfiguration:
    return small_generator_configuration()


@pytest.fixture(scope="session")
def benchmark_configuration() -> BenchmarkConfiguration:
    return BenchmarkConfiguration(
        universities=2, seed=42, generator=small_generator_configuration()
    )


@pytest.fixture(scope="session")
def loaded_store(benchmark_configuration):
    store = EphemeralStore()
    report = load(benchmark_configuration, store)
    return store, report
