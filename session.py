"""
Per-session dashboard state.

One load of the evaluation export happens per browser session:

    UNINITIALIZED -> LOADING -> LOADED(records) | LOAD_FAILED(no records)

Once loaded, the session tracks the search term and at most one
selected record.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from load_data import EvaluationRecord, LoadFailure
from scoring import search_students


class LoadStatus(Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    LOADED = "loaded"
    LOAD_FAILED = "load_failed"


class SessionStateError(RuntimeError):
    """A load transition was requested from the wrong state."""


@dataclass
class DashboardSession:
    status: LoadStatus = LoadStatus.UNINITIALIZED
    records: Tuple[EvaluationRecord, ...] = ()
    search_term: str = ""
    selection: Optional[EvaluationRecord] = None

    @property
    def is_loading(self) -> bool:
        return self.status is LoadStatus.LOADING

    @property
    def is_loaded(self) -> bool:
        """True once loading has finished, whether or not it succeeded."""
        return self.status in (LoadStatus.LOADED, LoadStatus.LOAD_FAILED)

    def _require(self, expected: LoadStatus, transition: str) -> None:
        if self.status is not expected:
            raise SessionStateError(
                f"Cannot {transition} while {self.status.value} (expected {expected.value})"
            )

    def start_load(self) -> None:
        self._require(LoadStatus.UNINITIALIZED, "start loading")
        self.status = LoadStatus.LOADING

    def load_succeeded(self, records: Iterable[EvaluationRecord]) -> None:
        self._require(LoadStatus.LOADING, "finish loading")
        self.records = tuple(records)
        self.status = LoadStatus.LOADED

    def load_failed(self) -> None:
        self._require(LoadStatus.LOADING, "fail loading")
        self.records = ()
        self.status = LoadStatus.LOAD_FAILED

    def load(self, fetch: Callable[[], List[EvaluationRecord]]) -> None:
        """
        Run the session's one load.

        A LoadFailure from fetch leaves the session loaded with no
        records instead of propagating. Any other error also ends the
        load as failed, then propagates.
        """
        self.start_load()
        try:
            records = fetch()
        except LoadFailure as e:
            print(f"  Warning: Failed to load evaluations: {e}")
            self.load_failed()
            return
        except Exception:
            self.load_failed()
            raise
        self.load_succeeded(records)

    # ==================== SEARCH & SELECTION ====================

    def set_search_term(self, term: str) -> None:
        self.search_term = term

    @property
    def matches(self) -> List[EvaluationRecord]:
        return search_students(self.records, self.search_term)

    def select(self, record: EvaluationRecord) -> None:
        """Make record the active selection and collapse the result list."""
        self.selection = record
        self.search_term = ""

    def clear_selection(self) -> None:
        self.selection = None
