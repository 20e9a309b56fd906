from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_internal_token
from services.roll_service import recalculate_batch_rolls

router = APIRouter(
    prefix="/batches",
    tags=["배치"],
    dependencies=[Depends(require_internal_token)],
)


# ✅ [ROLL] 배치 학번 재계산 (이름순) - 관리자 작업에서 한 번만 호출
@router.post("/{batch_id}/recalculate-rolls")
def recalculate_rolls(batch_id: int, db: Session = Depends(get_db)):
    result = recalculate_batch_rolls(db, batch_id)
    return {
        "success": True,
        "data": asdict(result),
        "message": f"배치 {batch_id} 학번 재계산 완료 ({result.updated}/{result.total}명 변경)",
    }
