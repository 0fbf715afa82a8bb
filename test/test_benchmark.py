from rdflib import RDF

from lubm_bench.benchmark import load, main, query, run_queries
from lubm_bench.configuration import BenchmarkConfiguration, Range, load_configuration
from lubm_bench.dataset import DataSet
from lubm_bench.failures import RuleSyntaxError, UnknownGoal
from lubm_bench.identifiers import UB, expand
from lubm_bench.model import Entity
from lubm_bench.queries import lubm_queries, query_1, query_4, query_6, query_9
from lubm_bench.store import EphemeralStore, Pattern


class RecordingDataSet(DataSet):
    """
    Data set that keeps every written record.
    """

    def __post_init__(self):
        super().__post_init__()
        self.records = []

    def write(self, obj):
        super().write(obj)
        self.records.extend(obj if isinstance(obj, list) else [obj])


def expected_triples(entity: Entity) -> int:
    document = entity.to_json()
    return sum(
        len(value) if isinstance(value, list) else 1
        for key, value in document.items()
        if key != "@id"
    )


def test_loaded_triples_match_records(benchmark_configuration, loaded_store):
    store, report = loaded_store

    dataset = RecordingDataSet(
        benchmark_configuration.seed,
        benchmark_configuration.universities,
        lambda bag: None,
        benchmark_configuration.generator,
    )
    for index in range(benchmark_configuration.universities):
        dataset.generate(index)

    assert report.triples == sum(expected_triples(e) for e in dataset.records)
    assert report.triples == len(store)
    assert report.elapsed_time >= 0


def test_undergraduate_students_query(loaded_store):
    store, _ = loaded_store
    undergraduates = list(store.match(Pattern(None, RDF.type, UB.UndergraduateStudent)))
    rows = query(store, query_6())
    assert len(rows) == len(undergraduates)


def test_department_faculty_query(loaded_store):
    store, _ = loaded_store
    department = expand("edu:University0.Department0")
    faculty = {s for s, _, _ in store.match(Pattern(None, UB.worksFor, department))}
    rows = query(store, query_4())
    assert faculty
    assert {row[0] for row in rows} == faculty
    assert len(rows) == len(faculty)


def test_graduate_course_query_returns_graduate_students(loaded_store):
    store, _ = loaded_store
    course = "edu:University0.Department0/GraduateCourse0"
    rows = query(store, query_1(course))
    takers = {
        s for s, _, _ in store.match(Pattern(None, UB.takesCourse, expand(course)))
    }
    assert {row[0] for row in rows} == takers


def test_advisor_course_query(loaded_store):
    store, _ = loaded_store
    for (student,) in query(store, query_9()):
        advisors = [o for _, _, o in store.match(Pattern(student, UB.advisor, None))]
        taught = {
            o
            for advisor in advisors
            for _, _, o in store.match(Pattern(advisor, UB.teacherOf, None))
        }
        taken = {o for _, _, o in store.match(Pattern(student, UB.takesCourse, None))}
        assert taught & taken


def test_all_queries_run(loaded_store):
    store, _ = loaded_store
    results = run_queries(store, lubm_queries())
    assert [result.index for result in results] == list(range(1, 10))
    assert all(result.error is None for result in results)
    assert all(len(result.times) == 1 for result in results)


def test_empty_result_on_store_without_courses():
    store = EphemeralStore()
    department = expand("edu:University0.Department0")
    store.add([(department, RDF.type, UB.Department)])
    assert query(store, query_1()) == []


def test_failed_query_does_not_stop_the_run(loaded_store):
    store, _ = loaded_store
    texts = [
        query_6(),
        "q(x) :- f(x, p",
        "f(s, p, o). r(x) :- f(x, p, o).",
        'f(s, p, o). q(x) :- f(x, ub:name, "a\\qb").',
        'f(s, p, o). q(x) :- f(x, ub:name, "a\tb").',
        query_6(),
    ]
    results = run_queries(store, texts, repetitions=2)

    assert results[0].error is None
    assert isinstance(results[1].error, RuleSyntaxError)
    assert isinstance(results[2].error, UnknownGoal)
    assert isinstance(results[3].error, RuleSyntaxError)
    assert isinstance(results[4].error, RuleSyntaxError)
    assert results[5].error is None
    assert results[5].count == results[0].count > 0
    assert len(results[5].times) == 2


def test_load_configuration_overrides():
    configuration = load_configuration(
        ["universities=3", "seed=5", "generator.departments.max=16"]
    )
    assert isinstance(configuration, BenchmarkConfiguration)
    assert configuration.universities == 3
    assert configuration.seed == 5
    assert configuration.generator.departments == Range(15, 16)
    assert configuration.generator.lecturers == Range(5, 7)


def test_load_configuration_defaults():
    assert load_configuration([]) == BenchmarkConfiguration()


def test_load_into_store(generator_configuration):
    configuration = BenchmarkConfiguration(
        universities=1, seed=3, queue_size=1, generator=generator_configuration
    )
    store = EphemeralStore()
    report = load(configuration, store)
    assert report.triples == len(store) > 0


def test_main(capsys):
    overrides = [
        "seed=9",
        "generator.departments.min=1",
        "generator.departments.max=1",
        "generator.research_groups.min=1",
        "generator.research_groups.max=1",
    ]
    main(overrides)
    output = capsys.readouterr().out
    assert "==> loaded" in output
    for index in range(1, 10):
        assert f"==> query #{index} " in output
    assert "failed" not in output


def test_one_university_with_default_departments(generator_configuration):
    generator_configuration.departments = Range(15, 25)
    configuration = BenchmarkConfiguration(
        universities=1, seed=1683234740, generator=generator_configuration
    )
    store = EphemeralStore()
    report = load(configuration, store)

    departments = list(store.match(Pattern(None, RDF.type, UB.Department)))
    assert 15 <= len(departments) <= 25

    dataset = RecordingDataSet(
        configuration.seed, configuration.universities, lambda bag: None, generator_configuration
    )
    dataset.generate(0)
    assert report.triples == sum(expected_triples(e) for e in dataset.records)
