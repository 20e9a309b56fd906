"""
services/notice_permissions.py

공지 작성/수정/삭제 권한을 한 곳에서 판단한다.

  역할      대상                                  작성 가능 여부
  -------  ------------------------------------  --------------------------------
  admin    전부                                   항상 가능
  teacher  course / batch                         본인 담당 배치(또는 그 과정)만
  teacher  all / students / teachers / semester   가능 (담당 여부 확인 없음)
  student  전부                                   불가

수정/삭제는 관리자 또는 작성자 본인만 가능.
"""

from typing import Optional

from sqlalchemy.orm import Session

from models.batches import Batch as BatchModel
from models.courses import Course as CourseModel
from models.notices import Notice as NoticeModel
from schemas.notices import BROAD_TARGETS, Role, TargetType
from services.affiliations import Actor, teaching_affiliations
from services.errors import PermissionDenied, ValidationError

TARGET_TYPES = [t.value for t in TargetType]


class NoticeAuthorizationGate:
    def __init__(self, db: Session):
        self.db = db

    # ==========================================================
    # 대상(target_type/target_value) 검증
    # ==========================================================
    def validate_target(self, target_type: Optional[str], target_value: Optional[str]) -> Optional[str]:
        """검증 후 저장할 target_value 를 돌려준다 (광역 공지는 None)."""
        if target_type not in TARGET_TYPES:
            raise ValidationError(f"Invalid target_type. Must be one of: {', '.join(TARGET_TYPES)}")

        if target_type in BROAD_TARGETS:
            return None

        value = str(target_value).strip() if target_value is not None else ""
        if not value:
            raise ValidationError(f"target_value is required when target_type is '{target_type}'")

        if target_type == TargetType.SEMESTER.value:
            if not value.isdigit() or int(value) < 1:
                raise ValidationError("target_value for a semester notice must be a positive number")
            return str(int(value))

        # course / batch → 실제 존재하는 ID 인지 확인
        model = BatchModel if target_type == TargetType.BATCH.value else CourseModel
        if not value.isdigit() or self.db.get(model, int(value)) is None:
            raise ValidationError(f"Unknown {target_type}: {value}")
        return str(int(value))

    # ==========================================================
    # 작성 권한
    # ==========================================================
    def check_create(self, actor: Actor, target_type: str, target_value: Optional[str]) -> None:
        if actor.role == Role.ADMIN.value:
            return

        if actor.role == Role.TEACHER.value:
            if target_type not in (TargetType.COURSE.value, TargetType.BATCH.value):
                return

            assignments = teaching_affiliations(self.db, actor.user_id)
            if target_type == TargetType.BATCH.value:
                assigned = {str(a.batch_id) for a in assignments}
                if target_value not in assigned:
                    raise PermissionDenied("You can only create notices for your assigned batches")
            else:
                assigned = {str(a.course_id) for a in assignments if a.course_id is not None}
                if target_value not in assigned:
                    raise PermissionDenied("You can only create notices for your assigned courses")
            return

        raise PermissionDenied(f"Role '{actor.role}' cannot create notices")

    # ==========================================================
    # 수정/삭제 권한
    # ==========================================================
    def check_mutation(self, actor: Actor, notice: NoticeModel, action: str = "update") -> None:
        if actor.role == Role.ADMIN.value or actor.user_id == notice.created_by:
            return
        raise PermissionDenied(f"You don't have permission to {action} this notice")
