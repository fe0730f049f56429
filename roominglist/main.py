"""
Main orchestrator for the Rooming List reconciliation system.
"""
import json
from pathlib import Path
from typing import Optional, List, Sequence

import click

from .extraction import SnapshotExtractor, combine_pages
from .export import export_guest_list
from .roster import build_dashboard, flatten_groups, reconcile_with_report
from .roster.dashboard import Dashboard
from .roster.guest_list import SORTABLE_FIELDS
from .utils.models import ALL, BookingSnapshot, ExtractionError, FilterContext, ReconciledRecord
from .utils.logger import setup_logger, RosterLogger
from config.settings import app_config, roster_config


class RosterPipeline:
    """Extract, reconcile and aggregate one batch of booking snapshots."""

    def __init__(self, log_level: str = "INFO", log_file: Optional[str] = None,
                 extractor: Optional[SnapshotExtractor] = None):
        self.logger = setup_logger("rooming_list", log_level, log_file)
        self.roster_logger = RosterLogger(self.logger)
        self.extractor = extractor or SnapshotExtractor(roster_logger=self.roster_logger)
        self.records: List[ReconciledRecord] = []

    def load_pages(self, pages: Sequence[str]) -> List[ReconciledRecord]:
        """
        Extract snapshots from OCR pages and reconcile them.

        Raises:
            ExtractionError: if extraction fails; no partial roster is kept
        """
        self.records = []
        snapshots = self.extractor.extract(combine_pages(pages))
        return self._reconcile(snapshots)

    def load_snapshot_file(self, path: Path) -> List[ReconciledRecord]:
        """Reconcile snapshots read from a JSON file."""
        self.records = []
        try:
            items = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ExtractionError(f"Snapshot file is not valid JSON: {e}") from e
        snapshots = self.extractor.to_snapshots(items)
        self.roster_logger.log_extraction("file", len(snapshots))
        return self._reconcile(snapshots)

    def _reconcile(self, snapshots: List[BookingSnapshot]) -> List[ReconciledRecord]:
        records, report = reconcile_with_report(snapshots)
        self.roster_logger.log_reconciliation(report)
        self.records = records
        return records

    def dashboard(self, context: FilterContext) -> Dashboard:
        return build_dashboard(self.records, context, roster_config.solo_hotel_target)

    def export(self, context: FilterContext, output: Path) -> int:
        """Write the filtered guest list to an XLSX file and return the row count."""
        dashboard = self.dashboard(context)
        records = flatten_groups(dashboard.guest_groups)
        output.write_bytes(export_guest_list(records, dashboard.split_stay_codes))
        self.logger.info("Export written", path=str(output), records=len(records))
        return len(records)


def _echo_series(title: str, series, unit: str):
    click.echo(f"\n{title}:")
    if not series:
        click.echo("  (no data)")
    for group in series:
        click.echo(f"  {group.label}: {group.count} {unit} ({group.percentage:.1f}%)")


@click.command()
@click.option('--input', 'input_files', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              multiple=True, help='OCR text file; repeat once per page')
@click.option('--snapshots', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='JSON file with already extracted snapshots')
@click.option('--flight-date', default=ALL, show_default=True, help='Flight date filter for statistics')
@click.option('--hotel', default=ALL, show_default=True, help='Hotel filter for the guest list')
@click.option('--agency', default=ALL, show_default=True, help='Agency filter for the guest list')
@click.option('--search', default='', help='Free-text guest search')
@click.option('--sort-key', type=click.Choice(SORTABLE_FIELDS), help='Guest list sort field')
@click.option('--descending', is_flag=True, help='Sort the guest list descending')
@click.option('--export', 'export_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Write the guest list to this XLSX file')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              default=app_config.log_level, help='Logging level')
@click.option('--log-file', type=str, default=app_config.log_file or None,
              help='Log file path (optional)')
def main(input_files, snapshots, flight_date, hotel, agency, search, sort_key, descending,
         export_path, log_level, log_file):
    """
    Rooming List reconciliation.

    Turns booking-email OCR text (or extracted snapshots) into a reconciled
    guest roster and prints its statistics.
    """
    if not input_files and not snapshots:
        raise click.UsageError("Provide --input OCR files or a --snapshots JSON file")

    pipeline = RosterPipeline(log_level, log_file)
    try:
        if snapshots:
            pipeline.load_snapshot_file(snapshots)
        else:
            pages = [path.read_text(encoding="utf-8") for path in input_files]
            pipeline.load_pages(pages)
    except ExtractionError as e:
        click.echo(f"Error: booking data could not be processed: {e}")
        click.get_current_context().exit(1)

    context = FilterContext(
        hotel=hotel,
        agency=agency,
        flight_date=flight_date,
        search_text=search,
        sort_key=sort_key,
        sort_direction="desc" if descending else "asc",
    )
    dashboard = pipeline.dashboard(context)
    stats = dashboard.stats

    click.echo(f"\n{roster_config.title}")
    click.echo(f"  Flight dates: {', '.join(dashboard.flight_dates[1:]) or '-'}")
    click.echo(f"  Total passengers: {stats.total_passengers}")
    click.echo(f"  Solo travelers at '{roster_config.solo_hotel_target}': {stats.solo_travelers}")
    click.echo(f"  Unique hotels: {stats.unique_hotels}")
    click.echo(f"  Hotel bookings: {stats.total_bookings}")

    _echo_series("Stays by hotel", dashboard.occupancy_by_hotel, "guests")
    _echo_series("Bookings by agency", dashboard.bookings_by_agency, "guests")
    _echo_series("Passengers by agency", dashboard.unique_passengers_by_agency, "pax")

    if dashboard.split_stay_codes:
        click.echo(f"\n⚠️  Split stays: {', '.join(dashboard.split_stay_codes)}")

    if export_path:
        try:
            rows = pipeline.export(context, export_path)
        except ValueError as e:
            click.echo(f"Error: {e}")
            click.get_current_context().exit(1)
        click.echo(f"\nExported {rows} records to {export_path}")

    pipeline.roster_logger.print_summary()


if __name__ == "__main__":
    main()
