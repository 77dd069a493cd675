import os

import pytest

from app.models.ppa import STATES

PPAS = {
    "lsec": {"name": "Lagos State Secretariat", "location": "Alausa, Ikeja", "state": "Lagos", "rating": 4.2, "reviews": 38},
    "lasu": {"name": "Lagos State University", "location": "Ojo", "state": "Lagos", "rating": 3.9, "reviews": 21},
    "ligh": {"name": "Lagos Island General Hospital", "location": "Lagos Island", "state": "Lagos", "rating": 4.5, "reviews": 17},
    "lsfc": {"name": "Lagos Street Food Co", "location": "Ibadan", "state": "Oyo", "rating": 3.0, "reviews": 2},
    "osec": {"name": "Oyo State Secretariat", "location": "Agodi", "state": "Oyo", "rating": 3.6, "reviews": 12},
}


@pytest.fixture
def seeded(db):
    for doc_id, data in PPAS.items():
        db.collection("ppas").document(doc_id).set(data)


def _names(resp):
    assert resp.status_code == 200
    return sorted(r["name"] for r in resp.json()["results"])


def test_prefix_and_state_filters_combine(client, auth_headers, seeded):
    resp = client.get("/ppas", params={"q": "Lagos S", "state": "Lagos"}, headers=auth_headers)

    assert _names(resp) == ["Lagos State Secretariat", "Lagos State University"]
    assert resp.json()["count"] == 2
    for result in resp.json()["results"]:
        assert result["name"].startswith("Lagos S")
        assert result["state"] == "Lagos"


def test_no_filters_returns_everything(client, auth_headers, seeded):
    resp = client.get("/ppas", headers=auth_headers)

    assert resp.json()["count"] == len(PPAS)


def test_prefix_only(client, auth_headers, seeded):
    resp = client.get("/ppas", params={"q": "Lagos S"}, headers=auth_headers)

    assert _names(resp) == ["Lagos State Secretariat", "Lagos State University", "Lagos Street Food Co"]


def test_state_only(client, auth_headers, seeded):
    resp = client.get("/ppas", params={"state": "Oyo"}, headers=auth_headers)

    assert _names(resp) == ["Lagos Street Food Co", "Oyo State Secretariat"]


def test_prefix_match_is_case_sensitive(client, auth_headers, seeded):
    resp = client.get("/ppas", params={"q": "lagos"}, headers=auth_headers)

    assert resp.json()["results"] == []


def test_search_requires_sign_in(client, seeded):
    assert client.get("/ppas").status_code == 401


def test_states_list(client):
    states = client.get("/ppas/states").json()["states"]

    assert states == STATES
    assert "Lagos" in states and "FCT" in states


def test_seed_file_populates_directory(client, auth_headers, db):
    from scripts.seed_db import load_seed, write_to_db

    seed = load_seed(os.path.join(os.path.dirname(__file__), "..", "db_seed.json"))
    assert write_to_db(db, seed, apply=False) == 0
    assert write_to_db(db, seed, apply=True) == len(seed["ppas"])

    resp = client.get("/ppas", params={"q": "Lagos S", "state": "Lagos"}, headers=auth_headers)

    assert _names(resp) == ["Lagos State Secretariat", "Lagos State University"]
