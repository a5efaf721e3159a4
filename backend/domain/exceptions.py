"""도메인 예외"""


class DomainError(Exception):
    """도메인 레이어 기본 예외"""
    code = "domain_error"
    status_code = 400


class NotAuthenticatedError(DomainError):
    code = "not_authenticated"
    status_code = 401

    def __init__(self):
        super().__init__("로그인이 필요합니다.")


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status_code = 401

    def __init__(self):
        super().__init__("이메일 또는 비밀번호가 올바르지 않습니다.")


class ForbiddenError(DomainError):
    code = "forbidden"
    status_code = 403

    def __init__(self, message: str = "권한이 없습니다."):
        super().__init__(message)


class StateConflictError(DomainError):
    """현재 상태에서 허용되지 않는 동작"""
    code = "state_conflict"
    status_code = 409

    def __init__(self, current: str, action: str):
        self.current = current
        self.action = action
        super().__init__(f"현재 상태({current})에서는 {action} 동작을 수행할 수 없습니다. 새로고침 후 다시 시도해주세요.")


class ValidationError(DomainError):
    code = "validation_error"
    status_code = 422


class OrderNotFoundError(DomainError):
    code = "not_found"
    status_code = 404

    def __init__(self, order_id: str):
        super().__init__(f"주문을 찾을 수 없습니다: {order_id}")


class PaymentNotFoundError(DomainError):
    code = "not_found"
    status_code = 404

    def __init__(self, payment_ref: str):
        super().__init__(f"결제 기록을 찾을 수 없습니다: {payment_ref}")


class UserNotFoundError(DomainError):
    code = "not_found"
    status_code = 404

    def __init__(self):
        super().__init__("사용자를 찾을 수 없습니다.")


class EmailAlreadyRegisteredError(DomainError):
    code = "email_taken"
    status_code = 400

    def __init__(self):
        super().__init__("이미 등록된 이메일입니다.")


class ServerError(DomainError):
    """데이터 저장소 / 스토리지 / 결제 게이트웨이 장애"""
    code = "server_error"
    status_code = 500

    def __init__(self, message: str = "서버 오류가 발생했습니다."):
        super().__init__(message)


class StoredFileNotFoundError(DomainError):
    code = "not_found"
    status_code = 404

    def __init__(self, path: str):
        super().__init__(f"파일을 찾을 수 없습니다: {path}")
