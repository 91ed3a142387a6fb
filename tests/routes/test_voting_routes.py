import pytest


def test_vote_is_accepted_and_duplicates_rejected(client, checked_in_voter, open_session):
    payload = {"national_id": "123456789", "apartment": "A101", "option": "Sí"}

    response = client.post("/votes", json=payload)
    assert response.status_code == 201
    ballot = response.get_json()["ballot"]
    assert ballot["weight"] == pytest.approx(1.5)
    assert ballot["option_label"] == "Sí"

    response = client.post("/votes", json=payload)
    assert response.status_code == 403
    body = response.get_json()
    assert body["error"] == "already_voted"
    assert body["message"] == "This ID has already voted."


@pytest.mark.parametrize(
    "payload, status, error",
    [
        ({"national_id": "000", "apartment": "A101", "option": "Sí"}, 403, "voter_not_registered"),
        ({"national_id": "123456789", "apartment": "B1", "option": "Sí"}, 403, "apartment_mismatch"),
        ({"national_id": "123456789", "apartment": "A101", "option": "Tal vez"}, 400, "invalid_option"),
    ],
)
def test_vote_rejections_map_to_status_codes(
    client, checked_in_voter, open_session, payload, status, error
):
    response = client.post("/votes", json=payload)

    assert response.status_code == status
    assert response.get_json()["error"] == error


def test_vote_without_open_session(client, checked_in_voter):
    response = client.post(
        "/votes", json={"national_id": "123456789", "apartment": "A101", "option": "Sí"}
    )

    assert response.status_code == 403
    assert response.get_json()["error"] == "session_inactive"


def test_vote_requires_id_and_apartment(client, open_session):
    response = client.post("/votes", json={"national_id": "", "apartment": "A101"})

    assert response.status_code == 400
    assert response.get_json()["error"] == "missing_fields"


def test_validate_reports_weight(client, checked_in_voter, open_session):
    response = client.post(
        "/votes/validate", json={"national_id": "123456789", "apartment": "A101"}
    )

    assert response.status_code == 200
    assert response.get_json() == {"ok": True, "valid": True, "weight": 1.5}


def test_validate_reports_not_checked_in(auth_client, open_session):
    auth_client.post("/voters", json={"national_id": "42", "apartment": "B2"})

    response = auth_client.post("/votes/validate", json={"national_id": "42", "apartment": "B2"})

    assert response.status_code == 403
    assert response.get_json()["error"] == "not_checked_in"


def test_current_session_snapshot_is_public(client, open_session):
    snapshot = client.get("/sessions/current").get_json()["session"]

    assert snapshot["state"] == "OPEN"
    assert snapshot["question"]["title"] == "¿Aprueba el presupuesto?"


def test_tally_is_hidden_until_results_are_visible(client, checked_in_voter, open_session):
    client.post("/votes", json={"national_id": "123456789", "apartment": "A101", "option": "no"})

    assert client.get("/tally").get_json() == {"ok": True, "results_visible": False}


def test_recent_votes_hide_voter_ids(client, checked_in_voter, open_session):
    client.post("/votes", json={"national_id": "123456789", "apartment": "A101", "option": "no"})

    recent = client.get("/votes/recent?limit=5").get_json()["ballots"]

    assert len(recent) == 1
    assert recent[0]["apartment"] == "A101"
    assert "national_id" not in recent[0]


def test_numeric_id_in_json_is_accepted(client, checked_in_voter, open_session):
    response = client.post(
        "/votes", json={"national_id": 123456789, "apartment": "A101", "option": "Sí"}
    )

    assert response.status_code == 201
    assert response.get_json()["ballot"]["national_id"] == "123456789"


@pytest.mark.parametrize(
    "payload",
    [
        {"national_id": ["123456789"], "apartment": "A101", "option": "Sí"},
        {"national_id": "123456789", "apartment": {"n": 101}, "option": "Sí"},
        {"national_id": True, "apartment": "A101", "option": "Sí"},
    ],
)
def test_malformed_fields_are_missing_fields(client, open_session, payload):
    response = client.post("/votes/validate", json=payload)

    assert response.status_code == 400
    assert response.get_json()["error"] == "missing_fields"
