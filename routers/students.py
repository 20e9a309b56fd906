from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_internal_token
from services.attendance_service import summarize_attendance

router = APIRouter(
    prefix="/students",
    tags=["학생 정보"],
    dependencies=[Depends(require_internal_token)],
)


# ✅ [SUMMARY] 특정 학생 출결 요약 (출석률 + 경고 여부)
@router.get("/{student_id}/attendance-summary")
def get_student_attendance_summary(student_id: str, db: Session = Depends(get_db)):
    summary = summarize_attendance(db, student_id)
    return {
        "success": True,
        "data": summary,
        "message": f"학생 ID {student_id} 출결 요약 조회 성공",
    }
