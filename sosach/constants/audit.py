from enum import Enum


class AuditAction(Enum):
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    LOGIN_FAILED = "LOGIN_FAILED"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    VIEW = "VIEW"
    ASSIGN = "ASSIGN"
    UNASSIGN = "UNASSIGN"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    EXPORT = "EXPORT"
    IMPORT = "IMPORT"
    BACKUP = "BACKUP"
    RESTORE = "RESTORE"


class AuditResource(Enum):
    USER = "USER"
    DEPARTMENT = "DEPARTMENT"
    UNIT = "UNIT"
    RANK = "RANK"
    POSITION = "POSITION"
    BOOK = "BOOK"
    BOOK_ENTRY = "BOOK_ENTRY"
    NOTIFICATION = "NOTIFICATION"
    TASK_ASSIGNMENT = "TASK_ASSIGNMENT"
    REPORT = "REPORT"
    AUTH = "AUTH"
    SYSTEM = "SYSTEM"


class AuditStatus(Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    PENDING = "PENDING"


METHOD_ACTIONS = {
    "POST": AuditAction.CREATE,
    "PUT": AuditAction.UPDATE,
    "PATCH": AuditAction.UPDATE,
    "DELETE": AuditAction.DELETE,
    "GET": AuditAction.VIEW,
}

# Checked before the method table.
PATH_ACTION_OVERRIDES = [
    ("/auth/login", AuditAction.LOGIN, AuditResource.AUTH),
    ("/auth/logout", AuditAction.LOGOUT, AuditResource.AUTH),
]

# Ordered: first substring match wins. "/task-assignments" must not be
# reachable through a shorter prefix, so keep the list order stable.
PATH_RESOURCES = [
    ("/users", AuditResource.USER),
    ("/departments", AuditResource.DEPARTMENT),
    ("/units", AuditResource.UNIT),
    ("/ranks", AuditResource.RANK),
    ("/positions", AuditResource.POSITION),
    ("/books", AuditResource.BOOK),
    ("/entries", AuditResource.BOOK_ENTRY),
    ("/notifications", AuditResource.NOTIFICATION),
    ("/reports", AuditResource.REPORT),
    ("/task-assignments", AuditResource.TASK_ASSIGNMENT),
]

DEFAULT_SKIP_PATHS = ["/api/health", "/health", "/api-docs", "/favicon.ico"]
SKIP_METHODS = ["OPTIONS"]

# Actions whose request body is recorded as newData.
BODY_CAPTURE_ACTIONS = [AuditAction.CREATE, AuditAction.UPDATE]
# Actions whose stored record is recorded as oldData.
SNAPSHOT_ACTIONS = [AuditAction.UPDATE, AuditAction.DELETE]

REDACTED_FIELDS = ["password"]

ACTION_NAMES_VI = {
    AuditAction.LOGIN: "đăng nhập",
    AuditAction.LOGOUT: "đăng xuất",
    AuditAction.CREATE: "tạo mới",
    AuditAction.UPDATE: "cập nhật",
    AuditAction.DELETE: "xóa",
    AuditAction.VIEW: "xem",
    AuditAction.ASSIGN: "phân công",
    AuditAction.UNASSIGN: "hủy phân công",
    AuditAction.APPROVE: "phê duyệt",
    AuditAction.REJECT: "từ chối",
    AuditAction.EXPORT: "xuất dữ liệu",
    AuditAction.IMPORT: "nhập dữ liệu",
}

RESOURCE_NAMES_VI = {
    AuditResource.USER: "người dùng",
    AuditResource.DEPARTMENT: "phòng ban",
    AuditResource.UNIT: "đơn vị",
    AuditResource.RANK: "cấp bậc",
    AuditResource.POSITION: "chức vụ",
    AuditResource.BOOK: "sổ sách",
    AuditResource.BOOK_ENTRY: "bản ghi sổ sách",
    AuditResource.NOTIFICATION: "thông báo",
    AuditResource.TASK_ASSIGNMENT: "giao việc",
    AuditResource.REPORT: "báo cáo",
    AuditResource.AUTH: "xác thực",
    AuditResource.SYSTEM: "hệ thống",
}

LOGIN_DESCRIPTION = "Đăng nhập vào hệ thống"
LOGOUT_DESCRIPTION = "Đăng xuất khỏi hệ thống"
UNKNOWN_ERROR_MESSAGE = "Unknown error"
UNKNOWN_VALUE = "Unknown"
