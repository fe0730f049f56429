"""
Roster session: holds the latest reconciled roster and derives views from it.
"""
from typing import Any, List, Optional, Sequence, Tuple

from ...extraction import SnapshotExtractor, combine_pages
from ...export import export_guest_list
from ...roster import build_dashboard, build_guest_list, flatten_groups, multi_hotel_codes, reconcile_with_report
from ...roster.dashboard import Dashboard
from ...utils.logger import RosterLogger
from ...utils.models import (
    BookingSnapshot, ExtractionError, FilterContext, LoadState, ReconciledRecord, ReconciliationReport
)
from config.settings import roster_config


class RosterNotReadyError(Exception):
    """No reconciled roster is available yet."""


class RosterService:
    """
    Owns the only mutable state of the system: the load state, the most
    recent reconciled roster and the last load error. Views are recomputed
    in full on every request.
    """

    def __init__(self, extractor: Optional[SnapshotExtractor], logger):
        self.logger = logger
        self.roster_logger = RosterLogger(logger)
        self.extractor = extractor or SnapshotExtractor(roster_logger=self.roster_logger)
        self.state = LoadState.EMPTY
        self.records: Tuple[ReconciledRecord, ...] = ()
        self.report = ReconciliationReport()
        self.last_error: Optional[str] = None

    def load_text(self, pages: Sequence[str]) -> ReconciliationReport:
        """
        Extract snapshots from OCR pages and reconcile them.

        Raises:
            ExtractionError: the extraction failed; no previous data is kept
        """
        self._begin_load()
        try:
            snapshots = self.extractor.extract(combine_pages(pages))
        except ExtractionError as e:
            self._fail(e)
            raise
        return self._finish_load(snapshots)

    def load_snapshots(self, items: Any) -> ReconciliationReport:
        """Reconcile snapshot objects supplied directly by the caller."""
        self._begin_load()
        try:
            snapshots = self.extractor.to_snapshots(items)
        except ExtractionError as e:
            self._fail(e)
            raise
        return self._finish_load(snapshots)

    def _begin_load(self):
        self.state = LoadState.PENDING
        self.records = ()
        self.last_error = None
        self.roster_logger.reset_stats()
        self.logger.info("Roster load started")

    def _fail(self, error: Exception):
        self.state = LoadState.FAILED
        self.records = ()
        self.report = ReconciliationReport()
        self.last_error = str(error)
        self.logger.error("Roster load failed", error=str(error))

    def _finish_load(self, snapshots: List[BookingSnapshot]) -> ReconciliationReport:
        records, report = reconcile_with_report(snapshots)
        self.records = tuple(records)
        self.report = report
        self.state = LoadState.READY
        self.roster_logger.log_reconciliation(report)
        return report

    def _require_ready(self):
        if self.state is not LoadState.READY:
            detail = f": {self.last_error}" if self.last_error else ""
            raise RosterNotReadyError(f"Roster is not available (state={self.state.value}){detail}")

    def get_records(self) -> List[ReconciledRecord]:
        self._require_ready()
        return list(self.records)

    def get_dashboard(self, context: FilterContext) -> Dashboard:
        self._require_ready()
        return build_dashboard(self.records, context, roster_config.solo_hotel_target)

    def export_excel(self, context: FilterContext) -> bytes:
        """
        Export the filtered, sorted guest list.

        Raises:
            RosterNotReadyError: nothing is loaded
            ValueError: the selection is empty
        """
        self._require_ready()
        records = flatten_groups(build_guest_list(self.records, context))
        return export_guest_list(records, multi_hotel_codes(self.records))
