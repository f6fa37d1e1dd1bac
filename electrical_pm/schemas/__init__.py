from electrical_pm.schemas.common import ApiResponse, PaginatedResponse, MessageResponse
from electrical_pm.schemas.user import (
    UserCreate, UserUpdate, UserResponse, Token, LoginRequest, LoginResponse
)
from electrical_pm.schemas.employee import (
    EmployeeCreate, EmployeeUpdate, EmployeeResponse, EmployeeStats
)
from electrical_pm.schemas.client import (
    ClientCreate, ClientUpdate, ClientResponse,
    ContactCreate, ContactUpdate, ContactResponse
)
from electrical_pm.schemas.project import (
    ProjectCreate, ProjectUpdate, ProjectResponse,
    ProjectMemberCreate, ProjectMemberResponse
)
from electrical_pm.schemas.sign_in import (
    SignInCreate, BulkSignInCreate, SignOutRequest, SignInResponse, BulkSignInResult
)
from electrical_pm.schemas.time_entry import (
    TimeEntryCreate, TimeEntryBulkCreate, TimeEntryUpdate, TimeEntryResponse
)
from electrical_pm.schemas.timesheet import (
    TimesheetCreate, TimesheetUpdate, TimesheetListItem, TimesheetResponse
)
from electrical_pm.schemas.payroll import (
    DailyReport, WeeklyReport, ProjectCostReport, PayrollSummary
)
from electrical_pm.schemas.quote import (
    QuoteCreate, QuoteUpdate, QuoteResponse, QuoteStats
)
from electrical_pm.schemas.daily_log import (
    DailyLogCreate, DailyLogUpdate, DailyLogResponse, DailyLogStats
)
from electrical_pm.schemas.file import FileUpdate, FileRecordResponse, FileStats, FileUploadBatch, FileUploadFailure

__all__ = [
    "ApiResponse", "PaginatedResponse", "MessageResponse",
    "UserCreate", "UserUpdate", "UserResponse", "Token", "LoginRequest", "LoginResponse",
    "EmployeeCreate", "EmployeeUpdate", "EmployeeResponse", "EmployeeStats",
    "ClientCreate", "ClientUpdate", "ClientResponse",
    "ContactCreate", "ContactUpdate", "ContactResponse",
    "ProjectCreate", "ProjectUpdate", "ProjectResponse",
    "ProjectMemberCreate", "ProjectMemberResponse",
    "SignInCreate", "BulkSignInCreate", "SignOutRequest", "SignInResponse", "BulkSignInResult",
    "TimeEntryCreate", "TimeEntryBulkCreate", "TimeEntryUpdate", "TimeEntryResponse",
    "TimesheetCreate", "TimesheetUpdate", "TimesheetListItem", "TimesheetResponse",
    "DailyReport", "WeeklyReport", "ProjectCostReport", "PayrollSummary",
    "QuoteCreate", "QuoteUpdate", "QuoteResponse", "QuoteStats",
    "DailyLogCreate", "DailyLogUpdate", "DailyLogResponse", "DailyLogStats",
    "FileUpdate", "FileRecordResponse", "FileStats", "FileUploadBatch", "FileUploadFailure",
]
