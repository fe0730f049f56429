"""
Reconciliation of per-email booking snapshots into the current roster.

A reservation code with any CANCELLATION snapshot is dropped entirely.
For every other code only the snapshots sharing the latest email timestamp
survive; ties are all kept.
"""
from typing import Dict, Iterable, List, Set, Tuple

from ..utils.models import BookingSnapshot, ReconciledRecord, ReconciliationReport
from ..utils.logger import get_logger
from .dates import parse_timestamp, FALLBACK_INSTANT

logger = get_logger("reconciler")


def cancelled_codes(snapshots: Iterable[BookingSnapshot]) -> Set[str]:
    """Reservation codes for which any snapshot reports a cancellation."""
    return {s.reservation_code for s in snapshots if s.is_cancellation}


def partition_by_code(snapshots: Iterable[BookingSnapshot]) -> Dict[str, List[BookingSnapshot]]:
    """Group snapshots by reservation code, keeping first-appearance order."""
    partitions: Dict[str, List[BookingSnapshot]] = {}
    for snapshot in snapshots:
        partitions.setdefault(snapshot.reservation_code, []).append(snapshot)
    return partitions


def reconcile_with_report(
    snapshots: List[BookingSnapshot],
) -> Tuple[List[ReconciledRecord], ReconciliationReport]:
    """
    Reconcile snapshots and describe what was dropped.

    Returns:
        (reconciled records, report)
    """
    report = ReconciliationReport(snapshots_received=len(snapshots))

    cancelled = cancelled_codes(snapshots)
    report.cancelled_codes = sorted(cancelled)

    live = [s for s in snapshots if s.reservation_code not in cancelled]
    report.cancelled_snapshots = len(snapshots) - len(live)

    reconciled: List[ReconciledRecord] = []
    for code, partition in partition_by_code(live).items():
        instants = [parse_timestamp(s.email_timestamp) for s in partition]

        for snapshot, instant in zip(partition, instants):
            if instant == FALLBACK_INSTANT:
                report.unparsable_timestamps += 1
                logger.warning(
                    "Unparsable email timestamp, treating as oldest",
                    reservation_code=code,
                    email_timestamp=snapshot.email_timestamp
                )

        latest = max(instants)
        kept = [s for s, instant in zip(partition, instants) if instant == latest]
        report.superseded_snapshots += len(partition) - len(kept)
        reconciled.extend(kept)

    report.records_kept = len(reconciled)
    logger.debug("Reconciliation finished", **report.to_dict())
    return reconciled, report


def reconcile(snapshots: List[BookingSnapshot]) -> List[ReconciledRecord]:
    """
    Collapse raw snapshots into one authoritative state per reservation code.

    Args:
        snapshots: Raw snapshots, one per passenger per email

    Returns:
        Snapshots belonging to the latest non-cancelled state of each code
    """
    records, _ = reconcile_with_report(snapshots)
    return records
