ADMIN = "admin@college.edu"
STUDENT = "asha@college.edu"


# --- dashboard & profile ---
def test_admin_dashboard_reports_failed_metrics(client, login, backend, store):
    backend.add_leave()
    login(ADMIN)
    backend.fail("GET", "/api/admin/classes", status=500)

    response = client.get("/portal/dashboard")
    assert response.status_code == 200
    body = response.json()
    assert body["data"]["classes"] == 0
    assert body["data"]["departments"] == 2
    assert body["data"]["pendingLeaves"] == 1
    assert body["metadata"]["failed_metrics"] == ["classes"]
    assert store.state.dashboard.stats.departments == 2


def test_profile_stats_never_fail(client, login, backend):
    login(STUDENT)
    backend.fail("GET", "/api/dashboard/stats", status=500)

    response = client.get("/portal/profile/stats")
    assert response.status_code == 200
    assert response.json()["totalLeaves"] == 0


# --- admin master data ---
def test_admin_routes_require_admin(client, login):
    login(STUDENT)
    assert client.get("/portal/admin/departments").status_code == 403


def test_admin_list_search(client, login):
    login(ADMIN)
    page = client.get("/portal/admin/students", params={"q": "ASHA"}).json()
    assert page["total"] == 1
    assert page["items"][0]["email"] == "asha@college.edu"


def test_admin_create_update_delete(client, login, backend):
    login(ADMIN)

    created = client.post("/portal/admin/classes", json={"className": "ME-B", "departmentId": "2"})
    assert created.status_code == 200
    assert created.json()["toast"]["message"] == "Class created successfully"
    assert [c["className"] for c in created.json()["data"]] == ["CS-A", "ME-B"]

    updated = client.put("/portal/admin/classes/2", json={"className": "ME-C", "departmentId": "2"})
    assert updated.status_code == 200
    assert [c["className"] for c in updated.json()["data"]] == ["CS-A", "ME-C"]

    deleted = client.delete("/portal/admin/classes/2")
    assert deleted.status_code == 200
    assert [c["className"] for c in deleted.json()["data"]] == ["CS-A"]


def test_admin_invalid_form(client, login, backend):
    login(ADMIN)
    calls_before = len(backend.calls)
    response = client.post("/portal/admin/departments", json={"departmentName": ""})
    assert response.status_code == 422
    assert response.json()["errors"][0]["msg"] == "Department: departmentName is required or invalid"
    assert len(backend.calls) == calls_before


def test_admin_unknown_resource(client, login):
    login(ADMIN)
    response = client.get("/portal/admin/parents")
    assert response.status_code == 422


def test_hierarchy_tree_with_counts(client, login):
    login(ADMIN)
    body = client.get("/portal/hierarchy").json()
    assert body["data"]["name"] == "College"
    assert body["data"]["children"][0]["type"] == "DEPARTMENT"
    assert body["metadata"]["counts"] == {"ROOT": 1, "DEPARTMENT": 1, "CLASS": 1, "TEACHER": 1, "STUDENT": 2}


# --- settings ---
def test_local_settings_change_applies_to_toasts(client, login, backend):
    login(STUDENT)
    calls_before = len(backend.calls)

    response = client.patch("/portal/settings", json={"theme": "dark", "toastPosition": "bottom-left"})
    assert response.status_code == 200
    assert response.json() == {"theme": "dark", "toastPosition": "bottom-left", "toastDuration": 3000}
    assert len(backend.calls) == calls_before

    toast = client.post("/portal/auth/logout").json()["toast"]
    assert toast["position"] == "bottom-left"


def test_save_settings_to_server(client, login, backend, store):
    login(STUDENT)

    response = client.put("/portal/settings", json={"theme": "dark", "toastPosition": "top-left", "toastDuration": 5000})
    assert response.status_code == 200
    assert response.json()["toast"]["duration_ms"] == 5000
    assert backend.ui_settings == {"theme": "dark", "toastPosition": "top-left", "toastDuration": 5000}
    assert store.ui_settings.theme == "dark"


def test_failed_save_keeps_local_settings(client, login, backend, store):
    login(STUDENT)
    backend.fail("PUT", "/api/settings", status=500, message="Failed to save settings")

    response = client.put("/portal/settings", json={"theme": "dark", "toastPosition": "top-left", "toastDuration": 5000})
    assert response.status_code == 502
    assert store.ui_settings.theme == "light"
    assert store.state.settings.error == "Failed to save settings"


def test_sync_merges_server_settings(client, login, backend):
    backend.ui_settings = {"theme": "dark"}
    login(STUDENT)
    client.patch("/portal/settings", json={"toastDuration": 1500})

    synced = client.post("/portal/settings/sync").json()
    assert synced == {"theme": "dark", "toastPosition": "top-right", "toastDuration": 1500}
    assert client.get("/portal/settings").json()["theme"] == "dark"
