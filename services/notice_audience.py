"""
services/notice_audience.py

공지 노출 대상(audience) 조건을 태그형 조건 객체로 표현하고
SQLAlchemy 필터식으로 변환한다.

    Everyone                      → 조건 없음 (관리자)
    TargetTypeIn(("all", ...))    → target_type 이 목록 중 하나
    CreatedBy(user_id)            → 본인이 작성한 공지
    TargetEquals("batch", "3")    → target_type/target_value 가 정확히 일치
    AnyOf(p1, p2, ...)            → 위 조건들의 OR

문자열을 이어 붙여 필터를 만들지 않으므로 target_value 에 어떤 값이 들어와도
항상 바인딩 파라미터로만 전달된다.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, Union

from sqlalchemy import and_, or_, true
from sqlalchemy.sql.elements import ColumnElement

from models.notices import Notice as NoticeModel
from schemas.notices import Role, TargetType
from services.errors import ValidationError


@dataclass(frozen=True)
class Everyone:
    def to_clause(self) -> ColumnElement:
        return true()


@dataclass(frozen=True)
class TargetTypeIn:
    target_types: Tuple[str, ...]

    def to_clause(self) -> ColumnElement:
        return NoticeModel.target_type.in_(self.target_types)


@dataclass(frozen=True)
class CreatedBy:
    user_id: str

    def to_clause(self) -> ColumnElement:
        return NoticeModel.created_by == self.user_id


@dataclass(frozen=True)
class TargetEquals:
    target_type: str
    target_value: str

    def to_clause(self) -> ColumnElement:
        return and_(
            NoticeModel.target_type == self.target_type,
            NoticeModel.target_value == self.target_value,
        )


@dataclass(frozen=True)
class AnyOf:
    predicates: Tuple["Predicate", ...]

    def to_clause(self) -> ColumnElement:
        return or_(*(p.to_clause() for p in self.predicates))


Predicate = Union[Everyone, TargetTypeIn, CreatedBy, TargetEquals, AnyOf]


@dataclass(frozen=True)
class StudentAffiliation:
    student_id: str
    batch_id: Optional[int] = None
    course_id: Optional[int] = None
    semester: Optional[int] = None


def audience_for(role: str, user_id: str, affiliation: Optional[StudentAffiliation] = None) -> Predicate:
    """역할별로 볼 수 있는 공지 조건을 만든다."""
    if role == Role.ADMIN.value:
        return Everyone()

    if role == Role.TEACHER.value:
        # 교사는 전체/교사 공지 + 본인이 쓴 공지 (대상과 무관)
        return AnyOf((
            TargetTypeIn((TargetType.ALL.value, TargetType.TEACHERS.value)),
            CreatedBy(user_id),
        ))

    if role == Role.STUDENT.value:
        predicates = [TargetTypeIn((TargetType.ALL.value, TargetType.STUDENTS.value))]
        if affiliation is not None:
            # target_value 는 문자열 컬럼 → 비교값도 문자열로
            if affiliation.semester is not None:
                predicates.append(TargetEquals(TargetType.SEMESTER.value, str(affiliation.semester)))
            if affiliation.batch_id is not None:
                predicates.append(TargetEquals(TargetType.BATCH.value, str(affiliation.batch_id)))
            if affiliation.course_id is not None:
                predicates.append(TargetEquals(TargetType.COURSE.value, str(affiliation.course_id)))
        return AnyOf(tuple(predicates))

    raise ValidationError(f"Invalid role: {role}. Must be one of: admin, teacher, student")


def not_expired(now: datetime) -> ColumnElement:
    # expires_at 이 NULL 이면 만료 없음, 현재 시각과 같으면 아직 노출
    return or_(NoticeModel.expires_at.is_(None), NoticeModel.expires_at >= now)
