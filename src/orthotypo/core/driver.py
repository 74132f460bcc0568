import logging
import os
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from pydantic import BaseModel, Field

from orthotypo.core.config import Config
from orthotypo.core.pipeline import check_file
from orthotypo.models import ErrorKind, FileError, FileResult

logger = logging.getLogger(__name__)


class ResultSink:
    """Collects file results from concurrent workers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._results: list[FileResult] = []

    def append(self, result: FileResult) -> None:
        with self._lock:
            self._results.append(result)

    def results(self) -> list[FileResult]:
        with self._lock:
            return list(self._results)


class RunReport(BaseModel):
    results: list[FileResult] = Field(default_factory=list)

    @property
    def diagnostic_count(self) -> int:
        return sum(len(result.diagnostics) for result in self.results)

    @property
    def error_count(self) -> int:
        return sum(len(result.errors) for result in self.results)

    @property
    def fixed_count(self) -> int:
        return sum(result.fixed for result in self.results)

    @property
    def failed(self) -> bool:
        return any(result.failed for result in self.results)


def _check_into(sink: ResultSink, path: Path, config: Config | None, write: bool) -> FileResult:
    try:
        result = check_file(path, config, write)
    except Exception as exc:
        logger.exception("Unexpected failure while checking %s", path)
        result = FileResult(path=str(path), errors=[FileError(kind=ErrorKind.INTERNAL, message=repr(exc))])
    # The buffer is only needed to locate diagnostics
    if not result.diagnostics:
        result.source = b""
    sink.append(result)
    return result


def run_checks(
    paths: Iterable[str | Path],
    config: Config | None = None,
    *,
    write: bool = False,
    jobs: int | None = None,
    sort: bool = False,
    on_result: Callable[[FileResult], None] | None = None,
) -> RunReport:
    """Check every file of ``paths`` on a bounded thread pool.

    Results arrive in completion order; ``sort`` orders the report by path.
    ``on_result`` is called from the calling thread for each finished file.
    """
    files = [Path(path) for path in paths]
    workers = jobs or os.cpu_count() or 1
    sink = ResultSink()

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_check_into, sink, path, config, write) for path in files]
        for future in as_completed(futures):
            result = future.result()
            if on_result is not None:
                on_result(result)

    results = sink.results()
    if sort:
        results.sort(key=lambda result: result.path)
    report = RunReport(results=results)
    logger.info(
        "Checked %d file(s): %d diagnostic(s), %d error(s)",
        len(results),
        report.diagnostic_count,
        report.error_count,
    )
    return report
