"""도메인 열거형"""
import enum


class UserRole(str, enum.Enum):
    CLIENT = "CLIENT"
    ADMIN = "ADMIN"


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    COMPLETED = "COMPLETED"
    REVISION = "REVISION"


class OrderPriority(str, enum.Enum):
    NORMAL = "NORMAL"
    URGENT = "URGENT"
    CRITICAL = "CRITICAL"


class OrderAction(str, enum.Enum):
    START_WORK = "START_WORK"
    UPLOAD_CONTENT = "UPLOAD_CONTENT"
    REQUEST_REVIEW = "REQUEST_REVIEW"
    APPROVE = "APPROVE"
    REQUEST_REVISION = "REQUEST_REVISION"


class FeedbackType(str, enum.Enum):
    APPROVAL = "APPROVAL"
    REVISION = "REVISION"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ServiceType(str, enum.Enum):
    PLAN = "PLAN"
    OTHER_SERVICE = "OTHER_SERVICE"
    BUNDLE = "BUNDLE"


class AccessReason(str, enum.Enum):
    NOT_AUTHENTICATED = "not_authenticated"
    PAYMENT_NOT_REQUIRED = "payment_not_required"
    PAYMENT_COMPLETED = "payment_completed"
    PAYMENT_REQUIRED = "payment_required"
    SERVER_ERROR = "server_error"
