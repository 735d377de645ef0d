DEFAULT_BODY = {"success": True, "message": "Request processed successfully"}


def test_update_all_fields(client):
    response = client.post(
        "/mock/control",
        json={"statusCode": 418, "responseBody": {"teapot": True}, "responseDelay": 5},
    )
    assert response.status_code == 200
    assert response.json() == {
        "message": "Mock configuration updated",
        "config": {"statusCode": 418, "responseBody": {"teapot": True}, "responseDelay": 5},
    }


def test_partial_update_keeps_other_fields(client):
    client.post("/mock/control", json={"responseBody": ["a", "b"]})
    config = client.post("/mock/control", json={"statusCode": 500}).json()["config"]
    assert config == {"statusCode": 500, "responseBody": ["a", "b"], "responseDelay": 0}


def test_falsy_status_and_body_are_ignored(client):
    # Known quirk: 0 and {} count as "not given"
    client.post("/mock/control", json={"statusCode": 201, "responseBody": {"ok": 1}})
    config = client.post("/mock/control", json={"statusCode": 0, "responseBody": {}}).json()["config"]
    assert config["statusCode"] == 201
    assert config["responseBody"] == {"ok": 1}


def test_zero_delay_is_applied(client):
    client.post("/mock/control", json={"responseDelay": 1500})
    config = client.post("/mock/control", json={"responseDelay": 0}).json()["config"]
    assert config["responseDelay"] == 0


def test_null_delay_is_ignored(client):
    client.post("/mock/control", json={"responseDelay": 300})
    config = client.post("/mock/control", json={"responseDelay": None}).json()["config"]
    assert config["responseDelay"] == 300


def test_values_are_not_coerced(client):
    config = client.post("/mock/control", json={"statusCode": "201"}).json()["config"]
    assert config["statusCode"] == "201"


def test_empty_or_non_json_body_changes_nothing(client):
    response = client.post("/mock/control")
    assert response.status_code == 200
    assert response.json()["config"] == {"statusCode": 200, "responseBody": DEFAULT_BODY, "responseDelay": 0}

    response = client.post("/mock/control", content="statusCode=500", headers={"Content-Type": "text/plain"})
    assert response.status_code == 200
    assert response.json()["config"]["statusCode"] == 200


def test_malformed_json_is_rejected(client):
    response = client.post("/mock/control", content="{bad", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json() == {"error": "Bad Request", "message": "Invalid JSON body"}

    response = client.post("/mock/control", json=[1, 2, 3])
    assert response.status_code == 400


def test_update_is_logged(client, log_path):
    client.post("/mock/control", json={"statusCode": 202})
    content = log_path.read_text(encoding="utf-8")
    assert '🎛️ MOCK CONTROL UPDATED: {"statusCode": 202' in content


def test_update_is_visible_in_status(client):
    client.post("/mock/control", json={"responseDelay": 42})
    assert client.get("/mock/status").json()["config"]["responseDelay"] == 42


def test_non_finite_numbers_are_rejected_and_config_kept(client):
    response = client.post(
        "/mock/control",
        content='{"statusCode": 201, "responseBody": {"x": NaN}}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Bad Request", "message": "Invalid JSON body"}

    status = client.get("/mock/status")
    assert status.status_code == 200
    assert status.json()["config"]["statusCode"] == 200

    response = client.post(
        "/mock/control",
        content='{"responseDelay": Infinity}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400


def test_form_encoded_update(client, valid_body):
    response = client.post("/mock/control", data={"statusCode": "503", "responseDelay": "0"})
    assert response.status_code == 200
    assert response.json()["config"] == {"statusCode": "503", "responseBody": DEFAULT_BODY, "responseDelay": "0"}

    data = client.post("/api/data", json=valid_body)
    assert data.status_code == 503
    assert data.json() == DEFAULT_BODY


def test_form_encoded_body_text(client):
    config = client.post("/mock/control", data={"responseBody": "maintenance"}).json()["config"]
    assert config["responseBody"] == "maintenance"


def test_form_encoded_falsy_status_is_ignored(client):
    config = client.post("/mock/control", data={"statusCode": ""}).json()["config"]
    assert config["statusCode"] == 200
