from models.employee import Employee


def test_list_visible_employees(client):
    client.login(20)

    ids = {e["id"] for e in client.get("/api/v1/employees").json()}

    assert ids == {20, 21, 22}


def test_list_with_manager_scope(client):
    client.login(1)

    ids = {e["id"] for e in client.get("/api/v1/employees", params={"manager_id": "30"}).json()}

    assert ids == {30, 31}


def test_hierarchy_chain(client):
    client.login(1)

    chain = client.get("/api/v1/employees/21/hierarchy-chain").json()

    assert chain == {
        "employee_id": 21,
        "head_lt_id": 1,
        "lt_id": 2,
        "alt_id": 3,
        "manager_id": 10,
        "tl_id": 20,
    }


def test_reassign_recomputes_manager_for_subtree(client, db):
    client.login(1)

    response = client.put("/api/v1/employees/20/reports-to", json={"reports_to": 30})

    assert response.status_code == 200
    assert db.get(Employee, 20).manager_id == 30
    assert db.get(Employee, 21).manager_id == 30
    assert db.get(Employee, 22).manager_id == 30


def test_reassign_into_own_subtree_rejected(client):
    client.login(1)

    response = client.put("/api/v1/employees/3/reports-to", json={"reports_to": 21})

    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_manager_deletes_team_lead_and_reports_are_detached(client, db):
    client.login(10)

    response = client.delete("/api/v1/employees/20")

    assert response.status_code == 200
    assert db.get(Employee, 20) is None
    assert db.get(Employee, 21).reports_to is None
    assert db.get(Employee, 22).reports_to is None


def test_manager_cannot_delete_invisible_employee(client):
    client.login(10)

    assert client.delete("/api/v1/employees/31").status_code == 403


def test_cannot_delete_self(client):
    client.login(20)

    assert client.delete("/api/v1/employees/20").status_code == 403


def test_admin_deletes_employee_under_same_manager(client, db):
    client.login(20)

    assert client.delete("/api/v1/employees/21").status_code == 200
    assert db.get(Employee, 21) is None
