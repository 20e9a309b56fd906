from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_internal_token
from schemas.notices import Notice, NoticeCreate, NoticeReadRequest, NoticeUpdate
from services.notice_service import NoticeService

router = APIRouter(
    prefix="/notices",
    tags=["공지사항"],
    dependencies=[Depends(require_internal_token)],
)


def get_notice_service(db: Session = Depends(get_db)) -> NoticeService:
    return NoticeService(db)


# ==========================================================
# [1단계] 목록 / 작성
# ==========================================================

# ✅ [READ] 역할별 공지 목록 (고정 → 최신순, 읽음 여부 포함)
@router.get("/")
def read_notices(
    user_id: Optional[str] = Query(None, description="조회하는 사용자 ID"),
    role: Optional[str] = Query(None, description="admin / teacher / student"),
    student_id: Optional[str] = Query(None, description="학생 ID (기본값: user_id)"),
    service: NoticeService = Depends(get_notice_service),
):
    notices = service.list_visible_notices(user_id, role, student_id)
    return {
        "success": True,
        "data": {
            "notices": notices,
            "unread_count": sum(1 for n in notices if not n.is_read),
        },
        "message": f"공지사항 {len(notices)}건 조회 완료",
    }


# ✅ [CREATE] 공지 작성
@router.post("/", status_code=201)
def create_notice(payload: NoticeCreate, service: NoticeService = Depends(get_notice_service)):
    notice = service.create_notice(payload)
    return {
        "success": True,
        "data": Notice.model_validate(notice),
        "message": "공지사항이 성공적으로 등록되었습니다",
    }


# ==========================================================
# [2단계] 상세 / 수정 / 삭제
# ==========================================================

# ✅ [READ] 공지 상세 + 읽은 사용자 목록
@router.get("/{notice_id}")
def read_notice(
    notice_id: int,
    user_id: Optional[str] = Query(None),
    service: NoticeService = Depends(get_notice_service),
):
    return {
        "success": True,
        "data": service.get_notice(notice_id, user_id),
        "message": "공지사항 상세 조회 성공",
    }


# ✅ [UPDATE] 공지 수정 (보낸 항목만)
@router.put("/{notice_id}")
def update_notice(notice_id: int, patch: NoticeUpdate, service: NoticeService = Depends(get_notice_service)):
    notice = service.update_notice(notice_id, patch, patch.user_id)
    return {
        "success": True,
        "data": Notice.model_validate(notice),
        "message": "공지사항이 성공적으로 수정되었습니다",
    }


# ✅ [DELETE] 공지 삭제 (읽음 기록 포함)
@router.delete("/{notice_id}")
def delete_notice(
    notice_id: int,
    user_id: Optional[str] = Query(None),
    service: NoticeService = Depends(get_notice_service),
):
    service.delete_notice(notice_id, user_id)
    return {
        "success": True,
        "data": {"notice_id": notice_id},
        "message": "공지사항이 성공적으로 삭제되었습니다",
    }


# ==========================================================
# [3단계] 읽음 표시
# ==========================================================

# ✅ [READ-MARK] 읽음 표시 (여러 번 호출해도 한 줄, read_at 만 갱신)
@router.post("/{notice_id}/read")
def mark_notice_read(notice_id: int, body: NoticeReadRequest, service: NoticeService = Depends(get_notice_service)):
    read = service.mark_read(notice_id, body.user_id)
    return {
        "success": True,
        "data": {"notice_id": read.notice_id, "user_id": read.user_id, "read_at": read.read_at},
        "message": "읽음 처리 완료",
    }


# ✅ [READ-UNMARK] 읽음 해제 (기록이 없어도 성공)
@router.delete("/{notice_id}/read")
def unmark_notice_read(
    notice_id: int,
    user_id: Optional[str] = Query(None),
    service: NoticeService = Depends(get_notice_service),
):
    service.unmark_read(notice_id, user_id)
    return {
        "success": True,
        "data": {"notice_id": notice_id, "user_id": user_id},
        "message": "읽음 해제 완료",
    }
