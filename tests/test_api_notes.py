"""Note endpoints."""

from uptask.models import db as _db
from uptask.models.note import Note
from uptask.models.task import Task
from uptask.services import note_service, task_service


def _notes_url(project, task):
    return f"/api/projects/{project.id}/tasks/{task.id}/notes"


def test_member_creates_note(client, project, task, member, auth_headers):
    res = client.post(_notes_url(project, task), headers=auth_headers(member), json={"content": " Ready "})

    assert res.status_code == 201
    assert res.get_data(as_text=True) == "Note created"
    note = Note.query.one()
    assert (note.content, note.created_by, note.task_id) == ("Ready", member.id, task.id)
    assert _db.session.get(Task, task.id).note_ids == [note.id]


def test_note_requires_content(client, project, task, member, auth_headers):
    res = client.post(_notes_url(project, task), headers=auth_headers(member), json={"content": ""})

    assert res.status_code == 400
    assert res.get_json()["errors"][0]["field"] == "content"
    assert Note.query.count() == 0


def test_outsider_cannot_create_note(client, project, task, outsider, auth_headers):
    res = client.post(_notes_url(project, task), headers=auth_headers(outsider), json={"content": "hi"})
    assert res.status_code == 404
    assert Note.query.count() == 0


def test_list_notes_in_creation_order(client, project, task, manager, member, auth_headers):
    note_service.create_note(task, manager.id, "one")
    note_service.create_note(task, member.id, "two")
    _db.session.commit()

    res = client.get(_notes_url(project, task), headers=auth_headers(member))

    assert res.status_code == 200
    data = res.get_json()
    assert [n["content"] for n in data] == ["one", "two"]
    assert data[1]["createdBy"] == {"id": member.id, "name": "Member", "email": "member@example.com"}


def test_author_deletes_note(client, project, task, member, auth_headers):
    note = note_service.create_note(task, member.id, "temp")
    _db.session.commit()
    nid = note.id

    res = client.delete(f"{_notes_url(project, task)}/{nid}", headers=auth_headers(member))

    assert res.status_code == 200
    assert res.get_data(as_text=True) == "Note deleted"
    assert _db.session.get(Note, nid) is None
    assert _db.session.get(Task, task.id).note_ids == []


def test_only_author_deletes_note(client, project, task, manager, member, auth_headers):
    note = note_service.create_note(task, member.id, "mine")
    _db.session.commit()

    res = client.delete(f"{_notes_url(project, task)}/{note.id}", headers=auth_headers(manager))

    assert res.status_code == 400
    assert res.get_json()["error"] == "Invalid action"
    assert Note.query.count() == 1


def test_note_under_other_task_is_not_found(client, project, task, member, auth_headers):
    sibling = task_service.create_task(project, {"name": "Other", "description": "d"})
    note = note_service.create_note(sibling, member.id, "elsewhere")
    _db.session.commit()

    res = client.delete(f"{_notes_url(project, task)}/{note.id}", headers=auth_headers(member))

    assert res.status_code == 404
    assert res.get_json()["error"] == "Note not found"
    assert Note.query.count() == 1


def test_notes_of_deleted_task_are_gone(client, project, task, manager, member, auth_headers):
    client.post(_notes_url(project, task), headers=auth_headers(member), json={"content": "N"})
    tid = task.id

    client.delete(f"/api/projects/{project.id}/tasks/{tid}", headers=auth_headers(manager))

    assert Note.query.filter_by(task_id=tid).all() == []
