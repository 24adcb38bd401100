"""
Document export: grouped HTML/Word table, CSV and PDF.
"""

import csv
import datetime as dt
import html
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .models import Dataset
from .schema import find_primary, headers, is_dataset
from .utils import timestamp_suffix

DOC_MIME_TYPE = "application/msword"
DEFAULT_EXPORT_NAME = "table.doc"
UNKNOWN_GROUP = "Unknown"

DOC_TEMPLATE = (
    '<html xmlns:o="urn:schemas-microsoft-com:office:office" '
    'xmlns:w="urn:schemas-microsoft-com:office:word" '
    'xmlns="http://www.w3.org/TR/REC-html40">'
    '<head><meta charset="utf-8"><title>Extracted Data</title></head>'
    "<body>{table}</body></html>"
)


@dataclass
class ExportRow:
    """One body row of the exported table."""
    values: List[str]
    rowspan: int = 1
    # False for non-first rows of a group: the spanning cell above covers them
    render_primary: bool = False


def header_label(name: str) -> str:
    """shop_name -> Shop Name"""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), name.replace("_", " "))


def group_rows(dataset: Optional[Dataset]) -> List[ExportRow]:
    """
    Lay out body rows, grouping by the primary column when there is one.

    Groups keep first-appearance order and rows keep their order inside a
    group. Records without a primary value fall under "Unknown". Without a
    primary column every record is its own row.
    """
    if not is_dataset(dataset):
        return []
    hdrs = headers(dataset)
    primary = find_primary(hdrs)

    if primary is None:
        return [ExportRow(values=[item.get(h) or "" for h in hdrs]) for item in dataset]

    grouped = {}
    for item in dataset:
        shop = item.get(primary) or UNKNOWN_GROUP
        grouped.setdefault(shop, []).append(item)

    rows = []
    for shop, items in grouped.items():
        for index, item in enumerate(items):
            first = index == 0
            values = [shop if first else ""]
            values.extend(item.get(h) or "" for h in hdrs[1:])
            rows.append(ExportRow(values=values,
                                  rowspan=len(items) if first else 1,
                                  render_primary=first))
    return rows


def render_table(dataset: Optional[Dataset]) -> str:
    """Render the dataset as an HTML table string."""
    hdrs = headers(dataset)
    grouped = find_primary(hdrs) is not None

    parts = ['<table border="1" style="border-collapse: collapse;"><thead><tr>']
    for header in hdrs:
        parts.append(f"<th>{html.escape(header_label(header))}</th>")
    parts.append("</tr></thead><tbody>")

    for row in group_rows(dataset):
        parts.append("<tr>")
        for idx, value in enumerate(row.values):
            if grouped and idx == 0:
                if not row.render_primary:
                    continue
                parts.append(f'<td rowspan="{row.rowspan}">{html.escape(value)}</td>')
            else:
                parts.append(f"<td>{html.escape(value)}</td>")
        parts.append("</tr>")

    parts.append("</tbody></table>")
    return "".join(parts)


def build_document(dataset: Optional[Dataset]) -> bytes:
    """Wrap the table in a container word processors open as a document."""
    return DOC_TEMPLATE.format(table=render_table(dataset)).encode("utf-8")


def unique_path(out_dir: Path, filename: str, now: Optional[dt.datetime] = None) -> Path:
    """
    Pick a destination in out_dir that does not exist yet.

    The fixed filename is used when free; otherwise a timestamp suffix is
    added, then a counter.
    """
    dest = out_dir / filename
    if not dest.exists():
        return dest
    stem, suffix = Path(filename).stem, Path(filename).suffix
    stamped = f"{stem}-{timestamp_suffix(now)}"
    dest = out_dir / f"{stamped}{suffix}"
    counter = 1
    while dest.exists():
        dest = out_dir / f"{stamped}-{counter}{suffix}"
        counter += 1
    return dest


def export_document(dataset: Optional[Dataset], out_dir: Path,
                    filename: str = DEFAULT_EXPORT_NAME,
                    now: Optional[dt.datetime] = None) -> Path:
    """Write the document into out_dir and return its path."""
    out_dir.mkdir(parents=True, exist_ok=True)
    dest = unique_path(out_dir, filename, now)
    dest.write_bytes(build_document(dataset))
    return dest


def write_csv(dataset: Optional[Dataset], out_csv: Path):
    """Write the dataset to a CSV file, columns in header order."""
    fieldnames = headers(dataset)
    with out_csv.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames, restval="")
        w.writeheader()
        for r in dataset or []:
            w.writerow({k: r.get(k) or "" for k in fieldnames})


def build_table_pdf(dataset: Optional[Dataset], out_pdf: Path,
                    title: str = "Extracted Data") -> int:
    """
    Build a PDF holding the grouped table.

    The primary cell of each group spans the rows of that group.

    Returns:
        Number of body rows written
    """
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import landscape, letter
    from reportlab.lib.styles import getSampleStyleSheet
    from reportlab.lib.units import inch
    from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

    hdrs = headers(dataset)
    rows = group_rows(dataset)
    grouped = find_primary(hdrs) is not None
    styles = getSampleStyleSheet()

    doc = SimpleDocTemplate(out_pdf.as_posix(), pagesize=landscape(letter),
                            leftMargin=0.5 * inch, rightMargin=0.5 * inch,
                            topMargin=0.6 * inch, bottomMargin=0.6 * inch)
    story = [Paragraph(html.escape(title), styles["Title"]), Spacer(1, 0.2 * inch)]

    if not hdrs:
        story.append(Paragraph("No data", styles["Normal"]))
        doc.build(story)
        return 0

    cell_style = styles["BodyText"]
    data = [[Paragraph(html.escape(header_label(h)), styles["Heading5"]) for h in hdrs]]
    for row in rows:
        data.append([Paragraph(html.escape(v), cell_style) for v in row.values])

    commands = [
        ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]
    if grouped:
        # Table rows are offset by one for the header row
        for i, row in enumerate(rows, start=1):
            if row.render_primary and row.rowspan > 1:
                commands.append(("SPAN", (0, i), (0, i + row.rowspan - 1)))

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle(commands))
    story.append(table)
    doc.build(story)
    return len(rows)
