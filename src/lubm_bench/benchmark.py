"""
Loads the LUBM dataset into an ephemeral store and measures the query latency.

Generation and ingestion failures halt the run. A query that fails to build is reported and the next query runs.
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field

import numpy as np
import tqdm
from typing_extensions import List, Optional, Sequence, Tuple

from . import logger
from .adapter import stream
from .configuration import BenchmarkConfiguration, load_configuration
from .dataset import DataSet
from .failures import RuleError
from .intake import Intake
from .queries import lubm_queries
from .rules import Context, Machine, parse
from .store import EphemeralStore, TripleStore


@dataclass
class LoadReport:
    triples: int
    """
    The number of ingested triples.
    """
    elapsed_time: float


@dataclass
class QueryResult:
    index: int
    count: int = 0
    """
    The number of result rows.
    """
    times: List[float] = field(default_factory=list)
    error: Optional[RuleError] = None

    @property
    def mean_time(self) -> float:
        return float(np.mean(self.times)) if self.times else float("nan")


@dataclass
class BenchmarkReport:
    load: LoadReport
    queries: List[QueryResult]


def load(configuration: BenchmarkConfiguration, store: TripleStore) -> LoadReport:
    """
    Generate all universities of the configuration into a store.

    :param configuration: The benchmark configuration.
    :param store: The store to load into.
    :return: The number of ingested triples and the loading time.
    """
    start_time = time.time()
    intake = Intake(store, maxsize=configuration.queue_size)
    dataset = DataSet(
        configuration.seed,
        configuration.universities,
        intake.put,
        configuration.generator,
    )
    try:
        for index in tqdm.tqdm(range(configuration.universities)):
            university_start_time = time.time()
            dataset.generate(index)
            tqdm.tqdm.write(
                f"==> university {index}: {sum(dataset.statistics.values())} records "
                f"in {time.time() - university_start_time:.3f}s"
            )
    finally:
        intake.close()
    triples = intake.join()
    return LoadReport(triples, time.time() - start_time)


def query(store: TripleStore, text: str, goal: str = "q") -> List[Tuple]:
    """
    Evaluate a rule text with the relation `f` served by a store.

    :param store: The store behind `f`.
    :param text: The rule text.
    :param goal: The relation whose tuples are returned.
    :return: Every derived tuple of the goal.
    """
    program = parse(text)
    context = Context().add("f", stream(store))
    machine = Machine.build(goal, program, context)
    return list(machine.stream(context))


def run_queries(
    store: TripleStore, texts: Sequence[str], repetitions: int = 1
) -> List[QueryResult]:
    """
    Evaluate the queries one after another.

    :param store: The loaded store.
    :param texts: The rule texts.
    :param repetitions: How often every query is evaluated.
    :return: The result of every query, failed ones carry their error.
    """
    results = []
    for index, text in enumerate(texts, start=1):
        result = QueryResult(index)
        try:
            for _ in range(repetitions):
                start_time = time.time()
                result.count = len(query(store, text))
                result.times.append(time.time() - start_time)
        except RuleError as e:
            logger.warning(f"Query #{index} failed: {e}")
            result.error = e
        results.append(result)
    return results


def run_benchmark(configuration: BenchmarkConfiguration) -> BenchmarkReport:
    store = EphemeralStore()
    load_report = load(configuration, store)
    print(f"==> loaded {load_report.triples} in {load_report.elapsed_time:.3f}s")

    results = run_queries(store, lubm_queries(), configuration.repetitions)
    for result in results:
        if result.error is None:
            print(f"==> query #{result.index} {result.count:8d} in {result.mean_time:.3f}s")
        else:
            print(f"==> query #{result.index} failed {result.error}")
    return BenchmarkReport(load_report, results)


def main(argv: Optional[Sequence[str]] = None):
    configuration = load_configuration(sys.argv[1:] if argv is None else argv)
    run_benchmark(configuration)

