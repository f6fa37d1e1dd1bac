"""Payroll reports built from time entries.

Two independent overtime rules are applied:

* daily report: hours above ``DAILY_OVERTIME_THRESHOLD`` (8h) in one day
* weekly report: hours above ``WEEKLY_OVERTIME_THRESHOLD`` (40h) across the
  requested range, regardless of how they are spread over the days

Rejected entries never count toward payroll.
"""
from collections import OrderedDict
from datetime import date
from typing import Dict, List, Optional, Tuple
from io import BytesIO
from sqlalchemy.orm import Session
from electrical_pm.core.config import settings
from electrical_pm.core.exceptions import NotFoundError, ValidationError
from electrical_pm.models.project import Project
from electrical_pm.models.sign_in import DailySignIn
from electrical_pm.models.time_entry import TimeEntry, TimeEntryStatus
from electrical_pm.schemas.payroll import (
    DailyEmployeeReport, DailyReport, DayHours, EmployeeCost, PayrollSummary,
    ProjectCostReport, ProjectHours, TopProject, WeeklyEmployeeReport, WeeklyReport
)
from electrical_pm.services.export_service import export_service
import logging

logger = logging.getLogger(__name__)

DAILY_CSV_COLUMNS = [
    "Employee ID", "First Name", "Last Name", "Classification", "Date",
    "Project ID", "Project Name", "Hours", "Work Type", "Sign In Time", "Sign Out Time",
]

WEEKLY_CSV_COLUMNS = [
    "Employee ID", "First Name", "Last Name", "Classification", "Week Start",
    "Week End", "Total Hours", "Regular Hours", "Overtime Hours", "Projects",
]

TOP_PROJECT_LIMIT = 5


def split_overtime(hours: float, threshold: float) -> Tuple[float, float]:
    """Return (regular, overtime) hours for a total against a threshold."""
    hours = round(hours, 2)
    if hours <= threshold:
        return hours, 0.0
    return round(threshold, 2), round(hours - threshold, 2)


def _format_hours(hours: float) -> str:
    return f"{hours:.2f}"


def _format_time(value) -> str:
    return value.strftime("%H:%M") if value else "N/A"


class PayrollService:

    def _payable_entries(self, db: Session, start_date: date, end_date: date, project_id: Optional[int] = None):
        """Entries that count toward payroll in the range.

        Rejected entries are left out of every report and export; pending and
        approved entries are both included.
        """
        query = db.query(TimeEntry).filter(
            TimeEntry.date >= start_date,
            TimeEntry.date <= end_date,
            TimeEntry.status != TimeEntryStatus.REJECTED.value
        )
        if project_id:
            query = query.filter(TimeEntry.project_id == project_id)
        return query.order_by(TimeEntry.date.asc(), TimeEntry.employee_id.asc(), TimeEntry.id.asc()).all()

    @staticmethod
    def _check_range(start_date: date, end_date: date):
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")

    @staticmethod
    def _sorted_by_name(employees: Dict[int, dict]) -> List[dict]:
        return sorted(
            employees.values(),
            key=lambda e: (e["last_name"].lower(), e["first_name"].lower(), e["employee_id"])
        )

    def generate_daily_report(self, db: Session, work_date: date) -> DailyReport:
        entries = self._payable_entries(db, work_date, work_date)

        sign_ins: Dict[int, List[DailySignIn]] = {}
        for record in db.query(DailySignIn).filter(DailySignIn.date == work_date).all():
            sign_ins.setdefault(record.employee_id, []).append(record)

        employees: Dict[int, dict] = {}
        for entry in entries:
            employee = entry.employee
            row = employees.get(employee.id)
            if row is None:
                records = sign_ins.get(employee.id, [])
                sign_out_times = [r.sign_out_time for r in records if r.sign_out_time]
                row = employees[employee.id] = {
                    "employee_id": employee.id,
                    "first_name": employee.first_name,
                    "last_name": employee.last_name,
                    "classification": employee.classification,
                    "projects": OrderedDict(),
                    "sign_in_time": min((r.sign_in_time for r in records), default=None),
                    "sign_out_time": max(sign_out_times, default=None),
                }
            project = row["projects"].setdefault(
                entry.project_id,
                {"project_id": entry.project_id, "project_name": entry.project.name, "hours_worked": 0.0}
            )
            project["hours_worked"] += entry.hours_worked

        reports = []
        for row in self._sorted_by_name(employees):
            projects = [
                ProjectHours(**{**p, "hours_worked": round(p["hours_worked"], 2)})
                for p in row.pop("projects").values()
            ]
            total = round(sum(p.hours_worked for p in projects), 2)
            regular, overtime = split_overtime(total, settings.DAILY_OVERTIME_THRESHOLD)
            reports.append(DailyEmployeeReport(
                **row,
                projects=projects,
                total_hours=total,
                regular_hours=regular,
                overtime_hours=overtime
            ))

        return DailyReport(
            date=work_date,
            employees=reports,
            grand_total_hours=round(sum(r.total_hours for r in reports), 2)
        )

    def generate_weekly_report(self, db: Session, start_date: date, end_date: date) -> WeeklyReport:
        self._check_range(start_date, end_date)
        entries = self._payable_entries(db, start_date, end_date)

        employees: Dict[int, dict] = {}
        for entry in entries:
            employee = entry.employee
            row = employees.setdefault(employee.id, {
                "employee_id": employee.id,
                "first_name": employee.first_name,
                "last_name": employee.last_name,
                "classification": employee.classification,
                "days": OrderedDict(),
            })
            day = row["days"].setdefault(entry.date, {"date": entry.date, "hours": 0.0, "projects": []})
            day["hours"] += entry.hours_worked
            if entry.project.name not in day["projects"]:
                day["projects"].append(entry.project.name)

        reports = []
        for row in self._sorted_by_name(employees):
            daily_hours = [
                DayHours(date=d["date"], hours=round(d["hours"], 2), projects=d["projects"])
                for d in sorted(row.pop("days").values(), key=lambda d: d["date"])
            ]
            total = round(sum(d.hours for d in daily_hours), 2)
            # Weekly-only rule: daily overtime is not carried into this report
            regular, overtime = split_overtime(total, settings.WEEKLY_OVERTIME_THRESHOLD)
            reports.append(WeeklyEmployeeReport(
                **row,
                daily_hours=daily_hours,
                total_hours=total,
                regular_hours=regular,
                overtime_hours=overtime
            ))

        return WeeklyReport(
            start_date=start_date,
            end_date=end_date,
            employees=reports,
            grand_total_hours=round(sum(r.total_hours for r in reports), 2)
        )

    def generate_project_cost_report(
        self,
        db: Session,
        project_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> ProjectCostReport:
        project = db.query(Project).filter(Project.id == project_id).first()

        query = db.query(TimeEntry).filter(
            TimeEntry.project_id == project_id,
            TimeEntry.status != TimeEntryStatus.REJECTED.value
        )
        if start_date:
            query = query.filter(TimeEntry.date >= start_date)
        if end_date:
            query = query.filter(TimeEntry.date <= end_date)
        entries = query.order_by(TimeEntry.date.asc(), TimeEntry.id.asc()).all()

        if not project or not entries:
            raise NotFoundError("Project not found or has no time entries")

        breakdown: Dict[int, dict] = OrderedDict()
        for entry in entries:
            employee = entry.employee
            row = breakdown.setdefault(employee.id, {
                "employee_id": employee.id,
                "name": employee.full_name,
                "classification": employee.classification,
                "hours": 0.0,
                "cost": 0.0,
                "rated_hours": 0.0,
            })
            # Entry-level rate overrides the employee's default rate
            rate = entry.hourly_rate if entry.hourly_rate is not None else employee.hourly_rate
            row["hours"] += entry.hours_worked
            if rate is not None:
                row["cost"] += entry.hours_worked * rate
                row["rated_hours"] += entry.hours_worked

        employees = []
        for row in breakdown.values():
            rated_hours = row.pop("rated_hours")
            employees.append(EmployeeCost(
                **{**row, "hours": round(row["hours"], 2), "cost": round(row["cost"], 2)},
                rate=round(row["cost"] / rated_hours, 2) if rated_hours else None
            ))

        return ProjectCostReport(
            project_id=project.id,
            project_name=project.name,
            project_number=project.project_number,
            start_date=start_date,
            end_date=end_date,
            employees=employees,
            total_hours=round(sum(e.hours for e in employees), 2),
            total_cost=round(sum(e.cost for e in employees), 2)
        )

    def get_payroll_summary(self, db: Session, start_date: date, end_date: date) -> PayrollSummary:
        self._check_range(start_date, end_date)
        entries = self._payable_entries(db, start_date, end_date)

        project_hours: Dict[int, dict] = {}
        for entry in entries:
            project = project_hours.setdefault(
                entry.project_id,
                {"project_id": entry.project_id, "project_name": entry.project.name, "hours": 0.0}
            )
            project["hours"] += entry.hours_worked

        top_projects = sorted(project_hours.values(), key=lambda p: (-p["hours"], p["project_id"]))
        return PayrollSummary(
            start_date=start_date,
            end_date=end_date,
            total_labor_hours=round(sum(e.hours_worked for e in entries), 2),
            # Entries without a stored rate carry no total_cost and add nothing here
            total_labor_cost=round(sum(e.total_cost or 0 for e in entries), 2),
            employee_count=len({e.employee_id for e in entries}),
            project_count=len(project_hours),
            top_projects=[
                TopProject(**{**p, "hours": round(p["hours"], 2)})
                for p in top_projects[:TOP_PROJECT_LIMIT]
            ]
        )

    def daily_csv_rows(self, report: DailyReport) -> List[dict]:
        """One row per employee and project; a row is Overtime once the day passes the threshold."""
        rows = []
        for employee in report.employees:
            running = 0.0
            for project in employee.projects:
                running += project.hours_worked
                work_type = "Regular" if running <= settings.DAILY_OVERTIME_THRESHOLD else "Overtime"
                rows.append({
                    "Employee ID": employee.employee_id,
                    "First Name": employee.first_name,
                    "Last Name": employee.last_name,
                    "Classification": employee.classification,
                    "Date": report.date.isoformat(),
                    "Project ID": project.project_id,
                    "Project Name": project.project_name,
                    "Hours": _format_hours(project.hours_worked),
                    "Work Type": work_type,
                    "Sign In Time": _format_time(employee.sign_in_time),
                    "Sign Out Time": _format_time(employee.sign_out_time),
                })
        return rows

    def weekly_csv_rows(self, report: WeeklyReport) -> List[dict]:
        rows = []
        for employee in report.employees:
            projects: List[str] = []
            for day in employee.daily_hours:
                projects.extend(p for p in day.projects if p not in projects)
            rows.append({
                "Employee ID": employee.employee_id,
                "First Name": employee.first_name,
                "Last Name": employee.last_name,
                "Classification": employee.classification,
                "Week Start": report.start_date.isoformat(),
                "Week End": report.end_date.isoformat(),
                "Total Hours": _format_hours(employee.total_hours),
                "Regular Hours": _format_hours(employee.regular_hours),
                "Overtime Hours": _format_hours(employee.overtime_hours),
                "Projects": "; ".join(projects),
            })
        return rows

    def export_daily_csv(self, db: Session, work_date: date) -> BytesIO:
        report = self.generate_daily_report(db, work_date)
        logger.info(f"Exporting daily payroll CSV for {work_date} ({len(report.employees)} employees)")
        return export_service.export_to_csv(self.daily_csv_rows(report), DAILY_CSV_COLUMNS)

    def export_weekly_csv(self, db: Session, start_date: date, end_date: date) -> BytesIO:
        report = self.generate_weekly_report(db, start_date, end_date)
        logger.info(
            f"Exporting weekly payroll CSV for {start_date}..{end_date} ({len(report.employees)} employees)"
        )
        return export_service.export_to_csv(self.weekly_csv_rows(report), WEEKLY_CSV_COLUMNS)


# Singleton instance
payroll_service = PayrollService()
