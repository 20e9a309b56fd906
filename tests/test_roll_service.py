import pytest
from sqlalchemy.exc import OperationalError

from models.batches import Batch
from models.students import Student
from services.errors import NotFoundError, RollRecalculationError
from services.roll_service import recalculate_batch_rolls


@pytest.fixture
def batch(campus):
    campus.add(Batch(id=10, course_id=1, academic_unit=2, section="C"))
    campus.commit()
    return 10


def _add_students(db, batch_id, *names_and_rolls):
    for i, (name, roll) in enumerate(names_and_rolls):
        db.add(Student(id=f"s-{batch_id}-{i}", full_name=name, roll=roll, batch_id=batch_id))
    db.commit()


def _rolls(db, batch_id):
    db.expire_all()
    students = db.query(Student).filter(Student.batch_id == batch_id).all()
    return {s.full_name: s.roll for s in students}


def test_rolls_follow_alphabetical_order(campus, batch):
    _add_students(campus, batch, ("Bob", None), ("Alice", None), ("Carol", None))

    result = recalculate_batch_rolls(campus, batch)

    assert _rolls(campus, batch) == {"Alice": "1", "Bob": "2", "Carol": "3"}
    assert (result.total, result.updated) == (3, 3)


def test_only_changed_rolls_are_written(campus, batch):
    _add_students(campus, batch, ("Alice", "1"), ("Bob", "7"), ("Carol", "3"))

    result = recalculate_batch_rolls(campus, batch)

    assert result.updated == 1
    assert _rolls(campus, batch) == {"Alice": "1", "Bob": "2", "Carol": "3"}


def test_sort_is_case_sensitive_as_stored(campus, batch):
    _add_students(campus, batch, ("alice", None), ("Bob", None), ("Zed", None))

    recalculate_batch_rolls(campus, batch)

    # 대문자가 소문자보다 앞 (코드포인트 순)
    assert _rolls(campus, batch) == {"Bob": "1", "Zed": "2", "alice": "3"}


def test_other_batches_are_untouched(campus, batch):
    _add_students(campus, batch, ("Alice", None))
    recalculate_batch_rolls(campus, batch)
    assert _rolls(campus, 1) == {"Sam Fifth": None}


def test_empty_batch_is_a_no_op(campus, batch):
    result = recalculate_batch_rolls(campus, batch)
    assert (result.total, result.updated) == (0, 0)


def test_unknown_batch_is_not_found(campus):
    with pytest.raises(NotFoundError):
        recalculate_batch_rolls(campus, 404)


def test_failed_write_rolls_back_whole_batch(campus, batch, monkeypatch):
    _add_students(campus, batch, ("Bob", None), ("Alice", None), ("Carol", None))
    real_flush = campus.flush
    calls = {"n": 0}

    def flaky_flush(*args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 2:
            raise OperationalError("UPDATE students", {}, Exception("lock wait timeout"))
        return real_flush(*args, **kwargs)

    monkeypatch.setattr(campus, "flush", flaky_flush)
    with pytest.raises(RollRecalculationError):
        recalculate_batch_rolls(campus, batch)
    monkeypatch.undo()

    assert _rolls(campus, batch) == {"Alice": None, "Bob": None, "Carol": None}
