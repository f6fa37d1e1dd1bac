from datetime import datetime
from fpdf import FPDF
from electrical_pm.core.config import settings
from electrical_pm.models.timesheet import Timesheet

# (header, width in mm, alignment)
ENTRY_COLUMNS = [
    ("Employee", 42, "L"),
    ("Project", 46, "L"),
    ("Hours", 18, "R"),
    ("Work Type", 22, "L"),
    ("Status", 22, "L"),
    ("Description", 45.9, "L"),
]


def _text(value) -> str:
    """Core PDF fonts are latin-1 only."""
    if value is None:
        return ""
    return str(value).encode("latin-1", "replace").decode("latin-1")


def _fit(pdf: FPDF, value: str, width: float) -> str:
    """Truncate text so it fits a table cell."""
    value = _text(value)
    if pdf.get_string_width(value) <= width - 2:
        return value
    while value and pdf.get_string_width(value + "...") > width - 2:
        value = value[:-1]
    return value + "..."


def generate_timesheet_pdf(timesheet: Timesheet) -> bytes:
    """Render a timesheet and its entries on US letter pages."""
    pdf = FPDF(format="Letter")
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    # --- Header ---
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, _text(f"{settings.COMPANY_NAME} Timesheet"), new_x="LMARGIN", new_y="NEXT", align="C")
    pdf.ln(2)

    creator = timesheet.creator.full_name if timesheet.creator else f"User {timesheet.created_by}"
    details = [
        ("Date", timesheet.date.strftime("%B %d, %Y")),
        ("Status", timesheet.status),
        ("Created By", creator),
    ]
    if timesheet.title:
        details.append(("Title", timesheet.title))
    if timesheet.approved_at:
        details.append(("Approved", timesheet.approved_at.strftime("%Y-%m-%d %H:%M")))

    for label, value in details:
        pdf.set_font("Helvetica", "B", 10)
        pdf.cell(30, 6, f"{label}:")
        pdf.set_font("Helvetica", "", 10)
        pdf.cell(0, 6, _text(value), new_x="LMARGIN", new_y="NEXT")

    if timesheet.notes:
        pdf.set_font("Helvetica", "B", 10)
        pdf.cell(30, 6, "Notes:")
        pdf.set_font("Helvetica", "", 10)
        pdf.multi_cell(0, 6, _text(timesheet.notes), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # --- Entries table ---
    pdf.set_font("Helvetica", "B", 9)
    pdf.set_fill_color(230, 230, 230)
    for header, width, align in ENTRY_COLUMNS:
        pdf.cell(width, 7, header, border=1, align=align, fill=True)
    pdf.ln()

    pdf.set_font("Helvetica", "", 9)
    total_hours = 0.0
    for entry in timesheet.time_entries:
        total_hours += entry.hours_worked
        employee = entry.employee.full_name if entry.employee else f"Employee {entry.employee_id}"
        project = entry.project.name if entry.project else f"Project {entry.project_id}"
        values = [
            employee,
            project,
            f"{entry.hours_worked:.2f}",
            entry.work_type,
            entry.status,
            entry.description or entry.task_performed or "",
        ]
        for (_, width, align), value in zip(ENTRY_COLUMNS, values):
            pdf.cell(width, 6, _fit(pdf, value, width), border=1, align=align)
        pdf.ln()

    if not timesheet.time_entries:
        pdf.set_font("Helvetica", "I", 9)
        pdf.cell(sum(width for _, width, _ in ENTRY_COLUMNS), 6, "No time entries", border=1, align="C")
        pdf.ln()

    # Totals row
    pdf.set_font("Helvetica", "B", 9)
    label_width = ENTRY_COLUMNS[0][1] + ENTRY_COLUMNS[1][1]
    pdf.cell(label_width, 7, "Total Hours", border=1, align="R")
    pdf.cell(ENTRY_COLUMNS[2][1], 7, f"{total_hours:.2f}", border=1, align="R")
    pdf.ln(12)

    pdf.set_font("Helvetica", "", 8)
    pdf.set_text_color(100, 100, 100)
    pdf.cell(0, 5, f"Generated {datetime.now().strftime('%Y-%m-%d %H:%M')}", new_x="LMARGIN", new_y="NEXT")

    return bytes(pdf.output())
