import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.batches import Batch as BatchModel
from models.students import Student as StudentModel
from services.errors import NotFoundError, RollRecalculationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RollRecalculationResult:
    batch_id: int
    total: int       # 배치 학생 수
    updated: int     # 실제로 학번이 바뀐 학생 수


def recalculate_batch_rolls(db: Session, batch_id: int) -> RollRecalculationResult:
    """
    배치 학생들의 학번을 이름순으로 "1", "2", "3"... 다시 매긴다.
    - 정렬은 DB 콜레이션과 무관하게 파이썬에서 (대소문자 구분, 저장된 그대로)
    - 바뀐 학번만 기록
    - 한 트랜잭션으로 처리: 한 명이라도 실패하면 배치 전체 롤백
    """
    batch = db.get(BatchModel, batch_id)
    if batch is None:
        raise NotFoundError(f"Batch {batch_id} not found")

    students = db.query(StudentModel).filter(StudentModel.batch_id == batch_id).all()
    ordered = sorted(students, key=lambda s: (s.full_name or "", s.id))

    updated = 0
    for index, student in enumerate(ordered, start=1):
        new_roll = str(index)
        if student.roll == new_roll:
            continue

        student_id = student.id
        student.roll = new_roll
        try:
            db.flush()
        except SQLAlchemyError as e:
            logger.error(f"학번 갱신 실패 - batch_id={batch_id}, student_id={student_id}, roll={new_roll}: {e}")
            db.rollback()
            raise RollRecalculationError(
                f"Failed to update roll for student {student_id}; batch {batch_id} was rolled back"
            ) from e
        updated += 1

    try:
        db.commit()
    except SQLAlchemyError as e:
        logger.error(f"학번 재계산 커밋 실패 - batch_id={batch_id}: {e}")
        db.rollback()
        raise RollRecalculationError(f"Failed to save rolls for batch {batch_id}") from e

    logger.info(f"Recalculated rolls for batch {batch_id}: {updated}/{len(ordered)} students updated.")
    return RollRecalculationResult(batch_id=batch_id, total=len(ordered), updated=updated)
