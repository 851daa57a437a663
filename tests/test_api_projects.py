"""Project endpoints: CRUD, visibility and existence hiding."""

import pytest

from uptask.models import db as _db
from uptask.models.project import Project
from uptask.services import project_service, team_service

BODY = {"projectName": "Shop", "clientName": "Globex", "description": "Online store"}


def test_create_project_makes_caller_manager(client, manager, auth_headers):
    res = client.post("/api/projects", headers=auth_headers(manager), json=BODY)

    assert res.status_code == 201
    assert res.get_data(as_text=True) == "Project created"
    proj = Project.query.one()
    assert proj.manager_id == manager.id
    assert proj.project_name == "Shop"
    assert proj.task_ids == []
    assert proj.team == []


def test_create_project_trims_fields(client, manager, auth_headers):
    body = {"projectName": "  Shop ", "clientName": " Globex", "description": "x "}
    client.post("/api/projects", headers=auth_headers(manager), json=body)

    proj = Project.query.one()
    assert (proj.project_name, proj.client_name, proj.description) == ("Shop", "Globex", "x")


def test_create_project_reports_every_missing_field(client, manager, auth_headers):
    res = client.post(
        "/api/projects", headers=auth_headers(manager), json={"projectName": "  "},
    )

    assert res.status_code == 400
    fields = [e["field"] for e in res.get_json()["errors"]]
    assert fields == ["projectName", "clientName", "description"]
    assert Project.query.count() == 0


def test_create_project_requires_token(client):
    res = client.post("/api/projects", json=BODY)
    assert res.status_code == 401
    assert res.get_json()["error"] == "Not authenticated"


def test_list_shows_managed_and_joined_projects(client, project, manager, member, outsider, auth_headers):
    own = project_service.create_project(
        manager_id=outsider.id,
        data={"projectName": "Private", "clientName": "C", "description": "D"},
    )
    _db.session.commit()

    as_manager = client.get("/api/projects", headers=auth_headers(manager)).get_json()
    as_member = client.get("/api/projects", headers=auth_headers(member)).get_json()
    as_outsider = client.get("/api/projects", headers=auth_headers(outsider)).get_json()

    assert [p["id"] for p in as_manager] == [project.id]
    assert [p["id"] for p in as_member] == [project.id]
    assert [p["id"] for p in as_outsider] == [own.id]


def test_get_project_populates_tasks(client, project, task, member, auth_headers):
    res = client.get(f"/api/projects/{project.id}", headers=auth_headers(member))

    assert res.status_code == 200
    data = res.get_json()
    assert data["projectName"] == "Website"
    assert data["manager"] == project.manager_id
    assert data["team"] == [project.team[0].id]
    assert [t["id"] for t in data["tasks"]] == [task.id]
    assert data["tasks"][0]["name"] == "Design"


def test_non_member_sees_same_response_as_missing_project(client, project, outsider, auth_headers):
    hidden = client.get(f"/api/projects/{project.id}", headers=auth_headers(outsider))
    missing = client.get("/api/projects/999999", headers=auth_headers(outsider))

    assert hidden.status_code == missing.status_code == 404
    assert hidden.get_json() == missing.get_json()


@pytest.mark.parametrize("method", ["put", "delete"])
def test_team_member_cannot_modify_project(client, project, member, auth_headers, method):
    res = getattr(client, method)(
        f"/api/projects/{project.id}", headers=auth_headers(member), json=BODY,
    )

    assert res.status_code == 404
    assert res.get_json()["error"] == "Project not found"
    assert _db.session.get(Project, project.id).project_name == "Website"


def test_manager_updates_project(client, project, manager, auth_headers):
    res = client.put(f"/api/projects/{project.id}", headers=auth_headers(manager), json=BODY)

    assert res.status_code == 200
    assert res.get_data(as_text=True) == "Project updated"
    proj = _db.session.get(Project, project.id)
    assert (proj.project_name, proj.client_name) == ("Shop", "Globex")


def test_update_validates_after_authorization(client, project, member, manager, auth_headers):
    # Non-manager gets the authorization error even with an invalid body
    assert client.put(
        f"/api/projects/{project.id}", headers=auth_headers(member), json={},
    ).status_code == 404
    assert client.put(
        f"/api/projects/{project.id}", headers=auth_headers(manager), json={},
    ).status_code == 400


def test_removed_member_loses_access(client, project, member, auth_headers):
    team_service.remove_member(project, member.id)
    _db.session.commit()

    res = client.get(f"/api/projects/{project.id}", headers=auth_headers(member))
    assert res.status_code == 404


def test_malformed_project_id_is_not_found(client, manager, auth_headers):
    res = client.get("/api/projects/not-an-id", headers=auth_headers(manager))
    assert res.status_code == 404


def test_unknown_route_returns_json_404(client):
    res = client.get("/api/nowhere")
    assert res.status_code == 404
    assert res.get_json()["error"] == "Not found"


def test_wrong_method_returns_405(client, project, manager, auth_headers):
    res = client.patch(f"/api/projects/{project.id}", headers=auth_headers(manager))
    assert res.status_code == 405
