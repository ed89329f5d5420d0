from app.models.user import UserRole
from app.services.notifications import create_notification, notify_users


def test_notify_users_skips_inactive_and_excluded_users(db, make_user):
    active = make_user("Anita Rao")
    inactive = make_user("Old Hand", is_active=False)
    admin = make_user("Principal Office", UserRole.admin)

    created = notify_users(
        db,
        user_ids=[active.id, active.id, inactive.id, admin.id, ""],
        title="Alternate timetable",
        message="Friday follows the sports day plan.",
        exclude_user_id=admin.id,
    )
    db.commit()

    assert [item.user_id for item in created] == [active.id]


def test_inbox_lists_only_own_notifications_and_marks_read(client, db, make_user, auth_headers):
    teacher = make_user("Anita Rao")
    colleague = make_user("Vikram Shah")
    own = create_notification(db, user_id=teacher.id, title="Substitute assignment", message="You are covering Maths.")
    foreign = create_notification(db, user_id=colleague.id, title="Substitute assigned", message="Someone covers you.")
    db.commit()
    own_id, foreign_id = own.id, foreign.id

    inbox = client.get("/api/notifications", headers=auth_headers(teacher))
    assert inbox.status_code == 200
    assert [item["id"] for item in inbox.json()] == [own_id]
    assert inbox.json()[0]["is_read"] is False

    marked = client.post(f"/api/notifications/{own_id}/read", headers=auth_headers(teacher))
    assert marked.status_code == 200
    assert marked.json()["is_read"] is True

    unread = client.get("/api/notifications", params={"is_read": "false"}, headers=auth_headers(teacher))
    assert unread.json() == []

    not_mine = client.post(f"/api/notifications/{foreign_id}/read", headers=auth_headers(teacher))
    assert not_mine.status_code == 404


def test_filter_by_slot_and_mark_all_read(client, db, make_user, auth_headers):
    teacher = make_user("Anita Rao")
    create_notification(db, user_id=teacher.id, title="Substitute assignment", message="Maths.", related_slot_id="slot-1")
    create_notification(db, user_id=teacher.id, title="Substitute assignment", message="Physics.", related_slot_id="slot-2")
    create_notification(db, user_id=teacher.id, title="Alternate timetable", message="Sports day.")
    db.commit()
    headers = auth_headers(teacher)

    about_slot = client.get("/api/notifications", params={"slot_id": "slot-2"}, headers=headers)
    assert [item["message"] for item in about_slot.json()] == ["Physics."]
    assert about_slot.json()[0]["related_slot_id"] == "slot-2"

    marked = client.post("/api/notifications/read-all", headers=headers)
    assert marked.json() == {"updated": 3}

    assert client.get("/api/notifications", params={"is_read": "false"}, headers=headers).json() == []
    assert client.post("/api/notifications/read-all", headers=headers).json() == {"updated": 0}
