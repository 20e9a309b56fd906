from pydantic import BaseModel, ConfigDict


# ✅ 학생별 출결 요약 (대시보드 카드용)
class AttendanceSummary(BaseModel):
    student_id: str                          # 학생 ID
    total: int                               # 전체 수업 수
    present: int                             # 출석
    absent: int                              # 결석
    late: int                                # 지각 (화면에서는 '조퇴/외출'로 표시)
    percentage: int                          # 출석률 (정수 %, 반올림)
    low_attendance: bool                     # 경고 기준 미만 여부

    model_config = ConfigDict(from_attributes=True)
