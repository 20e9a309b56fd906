"""
services/notice_service.py

- 공지 목록(역할/소속별 노출), 상세(읽음 현황), 작성/수정/삭제, 읽음 표시
- 요청 하나당 세션 하나로 생성해서 사용: NoticeService(db)
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Set

from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session, joinedload

from models.notice_reads import NoticeRead as NoticeReadModel
from models.notices import Notice as NoticeModel
from schemas.notices import (
    Notice,
    NoticeCreate,
    NoticeDetail,
    NoticeUpdate,
    ReadReceipt,
    Role,
    UserSummary,
    VisibleNotice,
    as_utc,
)
from services.affiliations import resolve_actor, student_affiliation
from services.errors import NotFoundError, ValidationError
from services.notice_audience import audience_for, not_expired
from services.notice_permissions import NoticeAuthorizationGate

logger = logging.getLogger(__name__)

REQUIRED_CREATE_FIELDS = ("title", "message", "target_type", "created_by")


class NoticeService:
    def __init__(self, db: Session):
        self.db = db
        self.gate = NoticeAuthorizationGate(db)

    # ==========================================================
    # [조회] 역할별 노출 공지 목록
    # ==========================================================
    def list_visible_notices(
        self,
        user_id: Optional[str],
        role: Optional[str],
        student_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[VisibleNotice]:
        """
        사용자에게 보이는 공지 목록
        - 만료된 공지 제외 (expires_at 이 NULL 이면 만료 없음)
        - 고정 공지 먼저, 그 안에서 최신순
        - 읽음 여부는 한 번의 조회로 일괄 계산
        """
        if not user_id or not role:
            raise ValidationError("user_id and role are required")

        affiliation = None
        if role == Role.STUDENT.value:
            affiliation = student_affiliation(self.db, student_id or user_id)

        audience = audience_for(role, user_id, affiliation)
        now = as_utc(now) or datetime.now(timezone.utc)

        records = (
            self.db.query(NoticeModel)
            .options(joinedload(NoticeModel.creator))
            .filter(not_expired(now))
            .filter(audience.to_clause())
            .order_by(NoticeModel.is_pinned.desc(), NoticeModel.created_at.desc(), NoticeModel.id.desc())
            .all()
        )

        read_ids = self._read_notice_ids(user_id, [r.id for r in records])
        return [
            VisibleNotice(
                **Notice.model_validate(r).model_dump(),
                created_by_user=UserSummary.model_validate(r.creator) if r.creator else None,
                is_read=r.id in read_ids,
            )
            for r in records
        ]

    def _read_notice_ids(self, user_id: str, notice_ids: List[int]) -> Set[int]:
        if not notice_ids:
            return set()
        rows = (
            self.db.query(NoticeReadModel.notice_id)
            .filter(NoticeReadModel.user_id == user_id)
            .filter(NoticeReadModel.notice_id.in_(notice_ids))
            .all()
        )
        return {r.notice_id for r in rows}

    # ==========================================================
    # [조회] 공지 상세 + 읽은 사용자 목록
    # ==========================================================
    def get_notice(self, notice_id: int, user_id: Optional[str] = None) -> NoticeDetail:
        notice = self._get_or_404(notice_id)
        reads = (
            self.db.query(NoticeReadModel)
            .options(joinedload(NoticeReadModel.user))
            .filter(NoticeReadModel.notice_id == notice_id)
            .order_by(NoticeReadModel.read_at.desc())
            .all()
        )

        detail = NoticeDetail(
            **Notice.model_validate(notice).model_dump(),
            created_by_user=UserSummary.model_validate(notice.creator) if notice.creator else None,
            reads=[ReadReceipt.model_validate(r) for r in reads],
        )
        if user_id:
            mine = next((r for r in reads if r.user_id == user_id), None)
            detail.is_read = mine is not None
            detail.read_at = mine.read_at if mine else None
        return detail

    # ==========================================================
    # [작성]
    # ==========================================================
    def create_notice(self, payload: NoticeCreate) -> NoticeModel:
        if any(not getattr(payload, f) for f in REQUIRED_CREATE_FIELDS):
            raise ValidationError("title, message, target_type, and created_by are required")

        target_value = self.gate.validate_target(payload.target_type, payload.target_value)
        actor = resolve_actor(self.db, payload.created_by)
        self.gate.check_create(actor, payload.target_type, target_value)

        notice = NoticeModel(
            title=payload.title,
            message=payload.message,
            attachment_url=payload.attachment_url or None,
            target_type=payload.target_type,
            target_value=target_value,
            is_pinned=bool(payload.is_pinned),
            expires_at=payload.expires_at,
            created_by=actor.user_id,
        )
        self.db.add(notice)
        self.db.commit()
        self.db.refresh(notice)
        logger.info(f"공지 작성 - id={notice.id}, by={actor.user_id}({actor.role}), target={notice.target_type}:{notice.target_value}")
        return notice

    # ==========================================================
    # [수정] 보낸 항목만 반영 (부분 수정)
    # ==========================================================
    def update_notice(self, notice_id: int, patch: NoticeUpdate, user_id: Optional[str]) -> NoticeModel:
        notice = self._get_or_404(notice_id)
        actor = resolve_actor(self.db, user_id)
        self.gate.check_mutation(actor, notice, "update")

        updates = patch.model_dump(exclude_unset=True, exclude={"user_id"})
        for field in ("title", "message"):
            if field in updates and not updates[field]:
                raise ValidationError(f"{field} cannot be empty")
        if updates.get("is_pinned", False) is None:
            updates.pop("is_pinned")

        if "target_type" in updates or "target_value" in updates:
            target_type = updates.get("target_type", notice.target_type)
            target_value = self.gate.validate_target(target_type, updates.get("target_value", notice.target_value))
            # 대상이 바뀌면 작성 때와 같은 기준으로 다시 확인
            self.gate.check_create(actor, target_type, target_value)
            updates["target_type"] = target_type
            updates["target_value"] = target_value

        for key, value in updates.items():
            setattr(notice, key, value)

        self.db.commit()
        self.db.refresh(notice)
        logger.info(f"공지 수정 - id={notice.id}, by={actor.user_id}, fields={sorted(updates)}")
        return notice

    # ==========================================================
    # [삭제] 공지 + 읽음 기록 함께 삭제
    # ==========================================================
    def delete_notice(self, notice_id: int, user_id: Optional[str]) -> None:
        if not user_id:
            raise ValidationError("user_id is required")
        notice = self._get_or_404(notice_id)
        actor = resolve_actor(self.db, user_id)
        self.gate.check_mutation(actor, notice, "delete")

        removed_reads = (
            self.db.query(NoticeReadModel)
            .filter(NoticeReadModel.notice_id == notice_id)
            .delete(synchronize_session=False)
        )
        self.db.delete(notice)
        self.db.commit()
        logger.info(f"공지 삭제 - id={notice_id}, by={actor.user_id}, reads_removed={removed_reads}")

    # ==========================================================
    # [읽음 표시] upsert / 해제
    # ==========================================================
    def mark_read(self, notice_id: int, user_id: Optional[str]) -> NoticeReadModel:
        if not user_id:
            raise ValidationError("user_id is required")
        self._get_or_404(notice_id)
        # 없는 사용자면 FK 오류(500) 대신 404
        resolve_actor(self.db, user_id)

        self.db.execute(_upsert_read_stmt(self.db, notice_id, user_id, datetime.now(timezone.utc)))
        self.db.commit()
        return (
            self.db.query(NoticeReadModel)
            .filter(NoticeReadModel.notice_id == notice_id, NoticeReadModel.user_id == user_id)
            .one()
        )

    def unmark_read(self, notice_id: int, user_id: Optional[str]) -> None:
        if not user_id:
            raise ValidationError("user_id is required")
        self.db.query(NoticeReadModel).filter(
            NoticeReadModel.notice_id == notice_id,
            NoticeReadModel.user_id == user_id,
        ).delete(synchronize_session=False)
        self.db.commit()

    def _get_or_404(self, notice_id: int) -> NoticeModel:
        notice = self.db.query(NoticeModel).filter(NoticeModel.id == notice_id).first()
        if notice is None:
            raise NotFoundError("Notice not found")
        return notice


def _upsert_read_stmt(db: Session, notice_id: int, user_id: str, read_at: datetime):
    """(notice_id, user_id) 유니크 키 기준 INSERT ... ON CONFLICT/DUPLICATE KEY UPDATE"""
    values = {"notice_id": notice_id, "user_id": user_id, "read_at": read_at}
    dialect = db.get_bind().dialect.name

    if dialect == "mysql":
        stmt = mysql_insert(NoticeReadModel).values(**values)
        return stmt.on_duplicate_key_update(read_at=stmt.inserted.read_at)

    if dialect == "postgresql":
        stmt = pg_insert(NoticeReadModel).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite_insert(NoticeReadModel).values(**values)
    else:
        raise NotImplementedError(f"notice read upsert is not supported on '{dialect}'")
    return stmt.on_conflict_do_update(
        index_elements=["notice_id", "user_id"],
        set_={"read_at": stmt.excluded.read_at},
    )
