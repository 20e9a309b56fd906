"""
services/affiliations.py

- 사용자 역할, 학생의 소속(배치/과정/학기), 교사의 담당 배치를 조회
- 공지 노출 계산과 권한 확인에서 공통으로 사용
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.batches import Batch as BatchModel
from models.students import Student as StudentModel
from models.teaching_assignments import TeachingAssignment as TeachingAssignmentModel
from models.users import User as UserModel
from services.errors import NotFoundError, ValidationError
from services.notice_audience import StudentAffiliation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: str


@dataclass(frozen=True)
class TeachingAffiliation:
    teacher_id: str
    batch_id: int
    course_id: Optional[int] = None


def resolve_actor(db: Session, user_id: Optional[str]) -> Actor:
    """요청자 ID → (ID, 역할). ID 누락은 400, 없는 사용자는 404"""
    if not user_id:
        raise ValidationError("user_id is required")
    user = db.query(UserModel).filter(UserModel.id == user_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return Actor(user_id=user.id, role=user.role)


def student_affiliation(db: Session, student_id: str) -> Optional[StudentAffiliation]:
    """
    학생 → 배치/과정/학기.
    조회 실패나 배치 미배정이면 None (공지 목록은 전체/학생 공지만 보이도록 축소)
    """
    try:
        row = (
            db.query(StudentModel.batch_id, BatchModel.course_id, BatchModel.academic_unit)
            .outerjoin(BatchModel, StudentModel.batch_id == BatchModel.id)
            .filter(StudentModel.id == student_id)
            .first()
        )
    except SQLAlchemyError:
        logger.warning(f"학생 소속 조회 실패 - student_id={student_id}", exc_info=True)
        db.rollback()
        return None

    if row is None or row.batch_id is None:
        logger.info(f"배치 미배정 학생 - student_id={student_id}")
        return None

    return StudentAffiliation(
        student_id=student_id,
        batch_id=row.batch_id,
        course_id=row.course_id,
        semester=row.academic_unit,
    )


def teaching_affiliations(db: Session, teacher_id: str) -> List[TeachingAffiliation]:
    rows = (
        db.query(TeachingAssignmentModel.batch_id, BatchModel.course_id)
        .outerjoin(BatchModel, TeachingAssignmentModel.batch_id == BatchModel.id)
        .filter(TeachingAssignmentModel.teacher_id == teacher_id)
        .all()
    )
    return [
        TeachingAffiliation(teacher_id=teacher_id, batch_id=r.batch_id, course_id=r.course_id)
        for r in rows
    ]
