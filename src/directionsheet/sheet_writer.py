# sheet_writer.py

import os
import re
import logging
from typing import List, Optional, Tuple

import gspread
from gspread.exceptions import WorksheetNotFound
from gspread.utils import convert_hex_to_colors_dict
from oauth2client.service_account import ServiceAccountCredentials

from .config import get_setting
from .formatter import colorize_rows, format_itinerary
from .gmaps_utils import LookupRoute, fetch_directions
from .itinerary import DisplayRow, Itinerary
from .units import meters_to_miles

logger = logging.getLogger(__name__)

# ─── Configurable Constants ─────────────────────────────────────────────────────

INPUT_SHEET = "Input"
DATA_SHEET = "Data"

INPUT_HEADERS = ["Start Address", "End Address"]
SAMPLE_ADDRESSES = [
    ["1600 Amphitheatre Pkwy, Mountain View, CA 94043", "345 Spear St, San Francisco, CA 94105"],
    ["Belfast City Hospital, Lisburn Rd, Belfast BT9 7AB", "Queen's University, University Rd, Belfast BT7 1NN"],
]
DATA_HEADERS = ["Step", "Distance (Meters)", "Distance (Miles)"]

ODD_ROW_COLOR = "#ffffff"
EVEN_ROW_COLOR = "#eeeeee"
HEADER_COLOR = "#dddddd"

SCOPE = [
    "https://spreadsheets.google.com/feeds",
    "https://www.googleapis.com/auth/drive"
]

row_number_re = re.compile(r"^\s*(\d+)\s*$")

# ─── Setup Connection to Google Sheet ───────────────────────────────────────────

def connect_to_spreadsheet(sheet_id: Optional[str] = None):
    service_account_file = get_setting("GOOGLE_SERVICE_ACCOUNT_JSON", "service_account.json")
    sheet_id = sheet_id or get_setting("GOOGLE_SHEET_ID")

    if not os.path.exists(service_account_file):
        raise FileNotFoundError(f"Service account file not found: {service_account_file}")

    creds = ServiceAccountCredentials.from_json_keyfile_name(service_account_file, SCOPE)
    client = gspread.authorize(creds)
    return client.open_by_key(sheet_id)


def get_or_create_worksheet(spreadsheet, title: str, rows: int = 100, cols: int = 10):
    try:
        return spreadsheet.worksheet(title)
    except WorksheetNotFound:
        logger.info("Creating worksheet %s", title)
        return spreadsheet.add_worksheet(title=title, rows=rows, cols=cols)


def _a1_row(row: int, columns: int) -> str:
    """A1 range covering columns A.. of a single 1-based row, e.g. 'A3:C3'."""
    last = gspread.utils.rowcol_to_a1(row, columns)
    return f"A{row}:{last}"


def _background(color: str) -> dict:
    return {"backgroundColor": convert_hex_to_colors_dict(color)}

# ─── "Prepare sheet..." ─────────────────────────────────────────────────────────

def prepare_sheet(spreadsheet):
    """
    Sets up the Input worksheet: address headers, a couple of sample rows,
    a bold frozen header and sized columns.
    """
    sheet = get_or_create_worksheet(spreadsheet, INPUT_SHEET)
    sheet.update(range_name="A1", values=[INPUT_HEADERS] + SAMPLE_ADDRESSES)
    sheet.format("A1:B1", {"textFormat": {"bold": True}, **_background(HEADER_COLOR)})
    sheet.freeze(rows=1)
    sheet.columns_auto_resize(0, len(INPUT_HEADERS))
    logger.info("Prepared %s worksheet", INPUT_SHEET)
    return sheet

# ─── Read addresses / row prompt ────────────────────────────────────────────────

def parse_row_number(text: str) -> int:
    """Validates the row number typed at the prompt."""
    match = row_number_re.match(text or "")
    if not match:
        raise ValueError(f"Invalid row number: {text}")
    return int(match.group(1))


def read_addresses(sheet, row: int) -> Tuple[str, str]:
    """Returns (start, end) from columns A and B of the given 1-indexed row."""
    if row < 2:
        raise ValueError(f"Row {row} is the header row; pick a row of addresses")

    values = sheet.row_values(row)
    # pad so a half-filled row still unpacks
    start, end = (list(values) + ["", ""])[:2]
    start, end = str(start).strip(), str(end).strip()
    if not start or not end:
        raise ValueError(f"Row {row} needs both a start and an end address")
    return start, end

# ─── Write the step-by-step table ───────────────────────────────────────────────

def build_rows(display_rows: List[DisplayRow], itinerary: Itinerary, miles_formula: Optional[str] = None) -> List[list]:
    """
    Cell values for the Data worksheet: header, one row per step, total.
    With miles_formula set, the miles column references that sheet function
    instead of holding the computed value.
    """
    rows = [list(DATA_HEADERS)]
    body = [row.as_list() for row in display_rows]
    body.append(["Total", itinerary.distance_meters, meters_to_miles(itinerary.distance_meters)])

    for offset, values in enumerate(body):
        if miles_formula:
            sheet_row = offset + 2  # header sits on row 1
            values[2] = f"={miles_formula}(B{sheet_row})"
        rows.append(values)
    return rows


def write_step_by_step(spreadsheet, itinerary: Itinerary, miles_formula: Optional[str] = None) -> List[DisplayRow]:
    display_rows = format_itinerary(itinerary)
    rows = build_rows(display_rows, itinerary, miles_formula)
    columns = len(DATA_HEADERS)
    total_row = len(rows)

    sheet = get_or_create_worksheet(spreadsheet, DATA_SHEET)
    sheet.clear()
    # RAW so an instruction starting with "=" stays text
    sheet.update(range_name="A1", values=rows, value_input_option="RAW")
    if miles_formula:
        sheet.update(range_name=f"C2:C{total_row}", values=[[values[2]] for values in rows[1:]],
                     value_input_option="USER_ENTERED")

    colors = colorize_rows(len(display_rows), columns, ODD_ROW_COLOR, EVEN_ROW_COLOR)
    formats = [
        {"range": _a1_row(1, columns), "format": {"textFormat": {"bold": True}, **_background(HEADER_COLOR)}},
    ]
    for index, row_colors in enumerate(colors):
        # every cell in a row shares one colour
        formats.append({"range": _a1_row(index + 2, columns), "format": _background(row_colors[0])})
    formats.append({"range": _a1_row(total_row, columns), "format": {"textFormat": {"bold": True}}})

    sheet.batch_format(formats)
    sheet.freeze(rows=1)
    sheet.columns_auto_resize(0, columns)

    logger.info("Wrote %d steps (%.2f miles) to %s", len(display_rows),
                meters_to_miles(itinerary.distance_meters), DATA_SHEET)
    return display_rows

# ─── "Generate step-by-step..." ─────────────────────────────────────────────────

def generate_step_by_step(spreadsheet, row: int, provider: Optional[LookupRoute] = None,
                          miles_formula: Optional[str] = None) -> List[DisplayRow]:
    """Reads the addresses on `row`, fetches directions and writes the Data sheet."""
    input_sheet = get_or_create_worksheet(spreadsheet, INPUT_SHEET)
    start, end = read_addresses(input_sheet, row)
    logger.info("Generating directions for row %d: %s -> %s", row, start, end)

    itinerary = fetch_directions(start, end, provider=provider)
    return write_step_by_step(spreadsheet, itinerary, miles_formula=miles_formula)
