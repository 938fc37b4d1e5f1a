# Application Messages
class AppMessages:
    TASK_ASSIGNMENT_CREATED = "Tạo giao việc thành công"
    TASK_ASSIGNMENT_UPDATED = "Cập nhật giao việc thành công"
    TASK_ASSIGNMENT_DELETED = "Xóa giao việc thành công"
    PROGRESS_UPDATED = "Cập nhật tiến độ thành công"
    STATUS_UPDATED = "Cập nhật trạng thái thành công"
    NOTE_ADDED = "Thêm ghi chú thành công"
    TASK_APPROVED = "Phê duyệt giao việc thành công"
    REMINDER_SCHEDULED = "Đã lên lịch nhắc nhở"
    OVERDUE_CHECK_COMPLETED = "Đã kiểm tra công việc quá hạn"
    NOTIFICATION_MARKED_READ = "Đã đánh dấu thông báo là đã đọc"
    NOTIFICATIONS_MARKED_READ = "Đã đánh dấu tất cả thông báo là đã đọc"
    NOTIFICATION_DELETED = "Đã xóa thông báo"
    NOTIFICATIONS_DELETED = "Đã xóa {0} thông báo"
    NOTIFICATION_CREATED = "Tạo thông báo thành công"


# Repository error messages
class RepositoryErrors:
    DB_INIT_FAILED = "Failed to initialize database: {0}"
    AUDIT_LOG_CREATION_FAILED = "Failed to create audit log: {0}"
    TASK_ASSIGNMENT_CREATION_FAILED = "Failed to create task assignment: {0}"


# API error messages
class ApiErrors:
    SERVER_ERROR = "Server Error"
    UNEXPECTED_ERROR = "Unexpected Error"
    INTERNAL_SERVER_ERROR = "Internal server error"
    VALIDATION_ERROR = "Validation Error"
    AUTHENTICATION_FAILED = "Authentication Failed"
    FORBIDDEN = "Forbidden"
    CONFLICT = "Conflict"
    RESOURCE_NOT_FOUND_TITLE = "Resource Not Found"
    TASK_ASSIGNMENT_NOT_FOUND = "Không tìm thấy giao việc {0}"
    TASK_ASSIGNMENT_NOT_FOUND_GENERIC = "Không tìm thấy giao việc"
    NOTIFICATION_NOT_FOUND = "Không tìm thấy thông báo {0}"
    USER_NOT_FOUND = "Không tìm thấy người dùng {0}"
    ASSIGNEE_NOT_FOUND = "Người nhận việc không tồn tại"
    BOOK_NOT_FOUND = "Sổ sách không tồn tại"
    BOOK_ENTRY_NOT_FOUND = "Mục sổ sách không tồn tại"
    UNEXPECTED_ERROR_OCCURRED = "An unexpected error occurred"
    REMINDER_DELIVERY_FAILED = "{0} reminder delivery failed: {1}"


# Permission error messages
class PermissionErrors:
    CANNOT_CREATE_TASK = "Không có quyền tạo giao việc"
    CANNOT_ACCESS_TASK = "Không có quyền truy cập công việc này"
    CANNOT_UPDATE_PROGRESS = "Chỉ người được giao việc mới có thể cập nhật tiến độ"
    CANNOT_APPROVE = "Không có quyền phê duyệt"
    CANNOT_UPDATE_TASK = "Không có quyền cập nhật giao việc này"
    CANNOT_DELETE_TASK = "Không có quyền xóa giao việc này"
    CANNOT_CANCEL_TASK = "Chỉ người giao việc hoặc quản trị viên mới có thể hủy công việc"
    CANNOT_RUN_OVERDUE_CHECK = "Không có quyền kiểm tra công việc quá hạn"
    ADMIN_ONLY = "Chỉ quản trị viên mới có quyền truy cập"


# Task state machine error messages
class TaskStateErrors:
    TERMINAL_STATUS = "Công việc đang ở trạng thái {0}, không thể thay đổi"
    INVALID_TRANSITION = "Không thể chuyển trạng thái từ {0} sang {1}"
    APPROVAL_NOT_REQUIRED = "Giao việc này không yêu cầu phê duyệt"
    COMPLETED_PROGRESS_LOCKED = "Công việc đã hoàn thành, tiến độ giữ ở 100%"


# Validation error messages
class ValidationErrors:
    INVALID_OBJECT_ID = "{0} is not a valid ObjectId."
    DEADLINE_BEFORE_ASSIGNED_AT = "Thời hạn hoàn thành phải sau thời gian giao việc"
    BLANK_TITLE = "Tiêu đề công việc là bắt buộc"
    BLANK_NOTE = "Nội dung ghi chú là bắt buộc"
    BLANK_REMINDER_MESSAGE = "Nội dung nhắc nhở là bắt buộc"
    EMPTY_UPDATE = "Cần ít nhất một trường để cập nhật"
    BLANK_NOTIFICATION_MESSAGE = "Nội dung thông báo là bắt buộc"
    PAGE_POSITIVE = "Page must be a positive integer"
    LIMIT_POSITIVE = "Limit must be a positive integer"
    MAX_LIMIT_EXCEEDED = "Maximum limit of {0} exceeded"


# Auth error messages
class AuthErrorMessages:
    TOKEN_MISSING = "Authentication token is required"
    TOKEN_EXPIRED = "Authentication token has expired"
    TOKEN_INVALID = "Invalid authentication token"
    TOKEN_EXPIRED_TITLE = "Token Expired"
    INVALID_TOKEN_TITLE = "Invalid Token"
    AUTHENTICATION_REQUIRED = "Authentication required"
