from datetime import timedelta

from models.project import Project
from services import clock


def create_project(client, **extra):
    payload = {"name": "Card tokenization", "priority": "High", **extra}
    return client.post("/api/v1/projects", json=payload)


def test_create_defaults_start_date_and_runs_schedule(client):
    client.login(10)
    planned_end = (clock.today() + timedelta(days=30)).isoformat()

    response = create_project(client, planned_end_date=planned_end)

    assert response.status_code == 201
    body = response.json()
    assert body["start_date"] == clock.today().isoformat()
    assert body["manager_id"] == 10
    assert body["stage"] == "BRS_Discussion"
    assert body["on_track_status"] == "On Track"
    assert body["man_days"] > 0


def test_employee_cannot_create_project(client):
    client.login(21)

    response = create_project(client)

    assert response.status_code == 403
    assert response.json()["error_code"] == "AUTHORIZATION_ERROR"


def test_unknown_stage_rejected(client):
    client.login(10)

    assert create_project(client, stage="Shipping").status_code == 422


def test_update_records_change_log_including_derived_fields(client):
    client.login(10)
    project_id = create_project(client).json()["id"]

    response = client.put(f"/api/v1/projects/{project_id}", json={"stage": "Under_Development"})

    assert response.status_code == 200
    assert response.json()["sprint_start_date"] == clock.today().isoformat()

    log = client.get(f"/api/v1/projects/{project_id}/change-log").json()
    changes = {row["field"]: (row["old_value"], row["new_value"]) for row in log}
    assert changes["stage"] == ("BRS_Discussion", "Under_Development")
    assert changes["sprint_start_date"] == (None, clock.today().isoformat())
    assert all(row["actor_id"] == 10 for row in log)


def test_unchanged_update_writes_no_change_log(client):
    client.login(10)
    project_id = create_project(client).json()["id"]

    client.put(f"/api/v1/projects/{project_id}", json={"name": "Card tokenization"})

    assert client.get(f"/api/v1/projects/{project_id}/change-log").json() == []


def test_read_applies_schedule(client, db):
    client.login(10)
    planned_end = (clock.today() + timedelta(days=30)).isoformat()
    project_id = create_project(client, planned_end_date=planned_end).json()["id"]

    project = db.get(Project, project_id)
    project.planned_end_date = clock.today() - timedelta(days=10)
    project.start_date = clock.today() - timedelta(days=40)
    db.commit()

    detail = client.get(f"/api/v1/projects/{project_id}").json()

    assert detail["project"]["on_track_status"] == "Delayed"
    assert "on_track_status" in detail["auto_updated"]
    assert detail["recommendations"][0]["type"] == "warning"


def test_projects_are_scoped_to_owning_manager(client):
    client.login(20)
    project_id = create_project(client).json()["id"]

    client.login(10)
    assert [p["id"] for p in client.get("/api/v1/projects").json()] == [project_id]

    client.login(30)
    assert client.get("/api/v1/projects").json() == []
    assert client.get(f"/api/v1/projects/{project_id}").status_code == 404


def test_list_filters_and_names(client):
    client.login(10)
    create_project(client, name="Alpha", priority="High")
    create_project(client, name="Beta", priority="Low")

    high = client.get("/api/v1/projects", params={"priority": "High"}).json()
    names = client.get("/api/v1/projects/names").json()

    assert [p["name"] for p in high] == ["Alpha"]
    assert sorted(p["name"] for p in names) == ["Alpha", "Beta"]


def test_analytics(client):
    client.login(10)
    create_project(client, name="Alpha", priority="High")
    create_project(client, name="Beta", priority="Low", stage="Live")

    analytics = client.get("/api/v1/projects/analytics/overview").json()

    assert analytics["total"] == 2
    assert analytics["live"] == 1
    assert analytics["by_stage"] == {"BRS_Discussion": 1, "Live": 1}
    assert analytics["by_on_track_status"] == {"On Track": 2, "Delayed": 0}
    assert analytics["by_priority"] == {"High": 1, "Low": 1}


def test_delete_project(client):
    client.login(10)
    project_id = create_project(client).json()["id"]
    client.put(f"/api/v1/projects/{project_id}", json={"priority": "Low"})

    assert client.delete(f"/api/v1/projects/{project_id}").status_code == 200
    assert client.get(f"/api/v1/projects/{project_id}").status_code == 404
