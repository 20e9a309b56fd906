from collections import Counter
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import func
from sqlalchemy.orm import Session

from config.settings import settings
from models.attendance import Attendance as AttendanceModel
from schemas.attendance import AttendanceSummary


def attendance_percentage(present: int, total: int) -> int:
    """출석률(%) - 소수점 첫째 자리에서 반올림 (0.5 → 올림)"""
    if not total:
        return 0
    ratio = Decimal(present * 100) / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def summarize_attendance(db: Session, student_id: str) -> AttendanceSummary:
    rows = (
        db.query(AttendanceModel.status, func.count(AttendanceModel.id))
        .filter(AttendanceModel.student_id == student_id)
        .group_by(AttendanceModel.status)
        .all()
    )
    counts = Counter({status: cnt for status, cnt in rows})

    total = sum(counts.values())
    present = counts.get("present", 0)
    percentage = attendance_percentage(present, total)

    return AttendanceSummary(
        student_id=student_id,
        total=total,
        present=present,
        absent=counts.get("absent", 0),
        late=counts.get("late", 0),
        percentage=percentage,
        # 기록이 없으면 경고하지 않음
        low_attendance=total > 0 and percentage < settings.ATTENDANCE_WARNING_PERCENT,
    )
