import datetime as dt
from pydantic import BaseModel
from typing import List, Optional


class ProjectHours(BaseModel):
    project_id: int
    project_name: str
    hours_worked: float


class DailyEmployeeReport(BaseModel):
    employee_id: int
    first_name: str
    last_name: str
    classification: str
    total_hours: float
    regular_hours: float
    overtime_hours: float
    projects: List[ProjectHours]
    sign_in_time: Optional[dt.datetime] = None
    sign_out_time: Optional[dt.datetime] = None


class DailyReport(BaseModel):
    date: dt.date
    employees: List[DailyEmployeeReport]
    grand_total_hours: float


class DayHours(BaseModel):
    date: dt.date
    hours: float
    projects: List[str]


class WeeklyEmployeeReport(BaseModel):
    employee_id: int
    first_name: str
    last_name: str
    classification: str
    daily_hours: List[DayHours]
    total_hours: float
    regular_hours: float
    overtime_hours: float


class WeeklyReport(BaseModel):
    start_date: dt.date
    end_date: dt.date
    employees: List[WeeklyEmployeeReport]
    grand_total_hours: float


class EmployeeCost(BaseModel):
    employee_id: int
    name: str
    classification: str
    hours: float
    rate: Optional[float] = None
    cost: float


class ProjectCostReport(BaseModel):
    project_id: int
    project_name: str
    project_number: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    employees: List[EmployeeCost]
    total_hours: float
    total_cost: float


class TopProject(BaseModel):
    project_id: int
    project_name: str
    hours: float


class PayrollSummary(BaseModel):
    start_date: dt.date
    end_date: dt.date
    total_labor_hours: float
    total_labor_cost: float
    employee_count: int
    project_count: int
    top_projects: List[TopProject]
