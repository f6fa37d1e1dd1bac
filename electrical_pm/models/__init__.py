from electrical_pm.models.user import User
from electrical_pm.models.employee import Employee, EmploymentStatus
from electrical_pm.models.client import Client, ClientContact, ClientType
from electrical_pm.models.project import Project, ProjectMember, ProjectStatus, ProjectType, BillingType
from electrical_pm.models.sign_in import DailySignIn
from electrical_pm.models.time_entry import TimeEntry, TimeEntryStatus
from electrical_pm.models.timesheet import Timesheet, TimesheetStatus
from electrical_pm.models.quote import Quote, QuoteStatus
from electrical_pm.models.daily_log import DailyLog
from electrical_pm.models.file import File, FileCategory
from electrical_pm.models.audit_log import AuditLog, AuditAction

__all__ = [
    "User",
    "Employee",
    "EmploymentStatus",
    "Client",
    "ClientContact",
    "ClientType",
    "Project",
    "ProjectMember",
    "ProjectStatus",
    "ProjectType",
    "BillingType",
    "DailySignIn",
    "TimeEntry",
    "TimeEntryStatus",
    "Timesheet",
    "TimesheetStatus",
    "Quote",
    "QuoteStatus",
    "DailyLog",
    "File",
    "FileCategory",
    "AuditLog",
    "AuditAction",
]
