import enum
from typing import Dict, FrozenSet, Tuple


class Role(str, enum.Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    OFFICE_ADMIN = "OFFICE_ADMIN"
    PROJECT_MANAGER = "PROJECT_MANAGER"
    FIELD_SUPERVISOR = "FIELD_SUPERVISOR"
    FIELD_WORKER = "FIELD_WORKER"
    CLIENT_READ_ONLY = "CLIENT_READ_ONLY"


class Resource(str, enum.Enum):
    FILES = "files"
    PROJECTS = "projects"
    CLIENTS = "clients"
    DAILY_LOGS = "daily_logs"
    USERS = "users"
    TIMESHEETS = "timesheets"
    QUOTES = "quotes"
    EMPLOYEES = "employees"
    SIGN_INS = "sign_ins"
    TIME_ENTRIES = "time_entries"
    PAYROLL = "payroll"


class Action(str, enum.Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    APPROVE = "approve"


SA = Role.SUPER_ADMIN
OA = Role.OFFICE_ADMIN
PM = Role.PROJECT_MANAGER
FS = Role.FIELD_SUPERVISOR
FW = Role.FIELD_WORKER
CRO = Role.CLIENT_READ_ONLY

ALL_ROLES = frozenset(Role)
STAFF_ROLES = ALL_ROLES - {CRO}


def _roles(*roles: Role) -> FrozenSet[Role]:
    return frozenset(roles)


PERMISSIONS: Dict[Tuple[Resource, Action], FrozenSet[Role]] = {
    (Resource.FILES, Action.READ): ALL_ROLES,
    (Resource.FILES, Action.CREATE): STAFF_ROLES,
    (Resource.FILES, Action.UPDATE): _roles(SA, OA, PM, FS),
    (Resource.FILES, Action.DELETE): _roles(SA, OA, PM),

    (Resource.PROJECTS, Action.READ): ALL_ROLES,
    (Resource.PROJECTS, Action.CREATE): _roles(SA, OA, PM),
    (Resource.PROJECTS, Action.UPDATE): _roles(SA, OA, PM),
    (Resource.PROJECTS, Action.DELETE): _roles(SA, OA),

    (Resource.CLIENTS, Action.READ): _roles(SA, OA, PM, FS, CRO),
    (Resource.CLIENTS, Action.CREATE): _roles(SA, OA, PM),
    (Resource.CLIENTS, Action.UPDATE): _roles(SA, OA, PM),
    (Resource.CLIENTS, Action.DELETE): _roles(SA, OA),

    (Resource.DAILY_LOGS, Action.READ): ALL_ROLES,
    (Resource.DAILY_LOGS, Action.CREATE): STAFF_ROLES,
    (Resource.DAILY_LOGS, Action.UPDATE): _roles(SA, OA, PM, FS),
    (Resource.DAILY_LOGS, Action.DELETE): _roles(SA, OA, PM),

    (Resource.USERS, Action.READ): _roles(SA, OA),
    (Resource.USERS, Action.CREATE): _roles(SA),
    (Resource.USERS, Action.UPDATE): _roles(SA, OA),
    (Resource.USERS, Action.DELETE): _roles(SA),

    (Resource.TIMESHEETS, Action.READ): _roles(SA, OA, PM, FS),
    (Resource.TIMESHEETS, Action.CREATE): _roles(SA, OA, PM, FS),
    (Resource.TIMESHEETS, Action.UPDATE): _roles(SA, OA, PM, FS),
    (Resource.TIMESHEETS, Action.DELETE): _roles(SA, OA, PM),
    (Resource.TIMESHEETS, Action.APPROVE): _roles(SA, OA, PM),

    (Resource.QUOTES, Action.READ): _roles(SA, OA, PM),
    (Resource.QUOTES, Action.CREATE): _roles(SA, OA, PM),
    (Resource.QUOTES, Action.UPDATE): _roles(SA, OA, PM),
    (Resource.QUOTES, Action.DELETE): _roles(SA),

    (Resource.EMPLOYEES, Action.READ): _roles(SA, OA, PM, FS),
    (Resource.EMPLOYEES, Action.CREATE): _roles(SA, OA),
    (Resource.EMPLOYEES, Action.UPDATE): _roles(SA, OA),
    (Resource.EMPLOYEES, Action.DELETE): _roles(SA, OA),

    (Resource.SIGN_INS, Action.READ): _roles(SA, OA, PM, FS, FW),
    (Resource.SIGN_INS, Action.CREATE): _roles(SA, OA, PM, FS),
    (Resource.SIGN_INS, Action.UPDATE): _roles(SA, OA, PM, FS),

    (Resource.TIME_ENTRIES, Action.READ): _roles(SA, OA, PM, FS),
    (Resource.TIME_ENTRIES, Action.CREATE): _roles(SA, OA, PM),
    (Resource.TIME_ENTRIES, Action.UPDATE): _roles(SA, OA, PM),
    (Resource.TIME_ENTRIES, Action.DELETE): _roles(SA, OA),
    (Resource.TIME_ENTRIES, Action.APPROVE): _roles(SA, OA, PM),

    (Resource.PAYROLL, Action.READ): _roles(SA, OA, PM),
}


def has_permission(role: str, resource: Resource, action: Action) -> bool:
    """Check a role against the static permission table; unknown pairs deny."""
    try:
        role = Role(role)
    except ValueError:
        return False
    return role in PERMISSIONS.get((resource, action), frozenset())
