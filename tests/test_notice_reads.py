import pytest

from models.notice_reads import NoticeRead
from services.errors import NotFoundError, ValidationError
from services.notice_service import NoticeService


def _read_rows(db, notice_id):
    return db.query(NoticeRead).filter(NoticeRead.notice_id == notice_id).all()


def test_mark_then_unmark_round_trip(campus, make_notice, now):
    notice = make_notice()
    service = NoticeService(campus)

    service.mark_read(notice.id, "student-5")
    [listed] = service.list_visible_notices("student-5", "student", now=now)
    assert listed.is_read is True

    service.unmark_read(notice.id, "student-5")
    [listed] = service.list_visible_notices("student-5", "student", now=now)
    assert listed.is_read is False


def test_mark_read_twice_keeps_one_row_and_refreshes_timestamp(campus, make_notice):
    notice = make_notice()
    service = NoticeService(campus)

    first = service.mark_read(notice.id, "student-5")
    first_read_at = first.read_at
    second = service.mark_read(notice.id, "student-5")

    rows = _read_rows(campus, notice.id)
    assert len(rows) == 1
    assert second.read_at >= first_read_at


def test_mark_read_requires_user_and_existing_notice(campus, make_notice):
    notice = make_notice()
    service = NoticeService(campus)
    with pytest.raises(ValidationError):
        service.mark_read(notice.id, None)
    with pytest.raises(NotFoundError):
        service.mark_read(9999, "student-5")


def test_unmark_without_a_read_is_a_no_op(campus, make_notice):
    notice = make_notice()
    NoticeService(campus).unmark_read(notice.id, "student-5")
    assert _read_rows(campus, notice.id) == []


def test_delete_removes_notice_and_its_reads(campus, make_notice, now):
    notice = make_notice(title="Holiday")
    service = NoticeService(campus)
    service.mark_read(notice.id, "student-5")
    service.mark_read(notice.id, "teacher-1")

    service.delete_notice(notice.id, "admin-1")

    assert _read_rows(campus, notice.id) == []
    for user_id, role in [("admin-1", "admin"), ("teacher-1", "teacher"), ("student-5", "student")]:
        assert service.list_visible_notices(user_id, role, now=now) == []


def test_notice_detail_lists_read_receipts(campus, make_notice):
    notice = make_notice(title="Fees due")
    service = NoticeService(campus)
    service.mark_read(notice.id, "student-5")

    detail = service.get_notice(notice.id, "student-5")
    assert detail.created_by_user.full_name == "Asha Admin"
    assert detail.is_read is True
    assert detail.read_at is not None
    assert [(r.user_id, r.user.role) for r in detail.reads] == [("student-5", "student")]

    other = service.get_notice(notice.id, "student-3")
    assert other.is_read is False
    assert other.read_at is None

    anonymous = service.get_notice(notice.id)
    assert anonymous.is_read is None

    service.unmark_read(notice.id, "student-5")
    assert service.get_notice(notice.id).reads == []


def test_notice_detail_unknown_id(campus):
    with pytest.raises(NotFoundError):
        NoticeService(campus).get_notice(12345)


def test_mark_read_by_unknown_user_is_not_found(campus, make_notice):
    notice = make_notice()
    with pytest.raises(NotFoundError, match="User not found"):
        NoticeService(campus).mark_read(notice.id, "ghost")
    assert _read_rows(campus, notice.id) == []
