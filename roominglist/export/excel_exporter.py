"""
Excel export of the guest list.

One sheet, one row per record in display order, a closing total row, and
split-stay reservations highlighted in light yellow.
"""
import io
from typing import Iterable, List, Optional, Sequence, Set

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from ..utils.logger import get_logger
from ..utils.models import BookingSnapshot

SHEET_NAME = "Huéspedes"

# (header, record attribute); "#" is the running row number
COLUMNS = [
    ("#", None),
    ("Agencia", "agency"),
    ("Hotel", "hotel"),
    ("Reserva", "reservation_code"),
    ("Nombre Completo", "full_name"),
    ("Fecha de Nacimiento", "birth_date"),
    ("Fecha de Vuelo", "flight_date"),
    ("Alojamiento", "accommodation"),
    ("Plan de Comidas", "meal_plan"),
    ("Fecha de Entrada", "check_in"),
    ("Fecha de Salida", "check_out"),
    ("Noches", "nights"),
    ("Pasaporte", "passport_number"),
    ("Edad", "age"),
    ("Nacionalidad", "nationality"),
]

SPLIT_STAY_FILL = PatternFill(start_color="FEFCE8", end_color="FEFCE8", fill_type="solid")
HEADER_FONT = Font(bold=True)

logger = get_logger("excel_exporter")


def _row_values(index: int, record: BookingSnapshot) -> List:
    values = []
    for _, attribute in COLUMNS:
        if attribute is None:
            values.append(index)
        else:
            values.append(getattr(record, attribute))
    return values


def export_guest_list(
    records: Sequence[BookingSnapshot],
    split_stay_codes: Optional[Iterable[str]] = None,
    sheet_name: str = SHEET_NAME,
) -> bytes:
    """
    Build an XLSX workbook from the flattened guest list.

    Args:
        records: Records in display order
        split_stay_codes: Reservation codes to highlight
        sheet_name: Worksheet title

    Returns:
        Workbook content as bytes

    Raises:
        ValueError: if there are no records to export
    """
    if not records:
        raise ValueError("No records to export")

    highlighted: Set[str] = set(split_stay_codes or ())

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name

    ws.append([header for header, _ in COLUMNS])
    for cell in ws[1]:
        cell.font = HEADER_FONT

    for index, record in enumerate(records, start=1):
        ws.append(_row_values(index, record))
        if record.reservation_code in highlighted:
            for cell in ws[ws.max_row]:
                cell.fill = SPLIT_STAY_FILL

    name_col = [header for header, _ in COLUMNS].index("Nombre Completo") + 1
    total_row = ws.max_row + 1
    ws.cell(row=total_row, column=1).value = "Total"
    ws.cell(row=total_row, column=name_col).value = f"{len(records)} registros"
    ws.cell(row=total_row, column=1).font = HEADER_FONT

    for col_idx, (header, _) in enumerate(COLUMNS, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = max(6, len(header) + 4)

    buf = io.BytesIO()
    wb.save(buf)
    logger.info("Guest list exported", records=len(records), highlighted=len(highlighted))
    return buf.getvalue()
