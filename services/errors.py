"""
services/errors.py

- 서비스 계층에서 발생시키는 도메인 예외 모음
- 라우터에서 잡지 않고 그대로 올리면 middlewares/error_handler.py가
  {"success": False, "error": {"code", "message"}} 형태로 변환
"""


class ServiceError(Exception):
    code = "SERVICE_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """필수값 누락 / 잘못된 값 (400)"""
    code = "VALIDATION_ERROR"
    status_code = 400


class PermissionDenied(ServiceError):
    """작성/수정/삭제 권한 없음 (403)"""
    code = "PERMISSION_DENIED"
    status_code = 403


class NotFoundError(ServiceError):
    """대상 공지/사용자/배치 없음 (404)"""
    code = "NOT_FOUND"
    status_code = 404


class RollRecalculationError(ServiceError):
    """학번 재계산 중 저장 실패 → 배치 전체 롤백 (500)"""
    code = "ROLL_RECALCULATION_FAILED"
    status_code = 500
