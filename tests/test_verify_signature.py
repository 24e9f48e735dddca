import json

import pytest

from tests.conftest import FakeContract


def test_verify_signature_no_record(client, opener):
    """
    The sentinel signee "0" means nothing is on record for this key and terms.
    """
    response = client.get("/verifySignature", params={"pubKey": "ed25519:xyz", "tosHash": "abc"})
    assert response.status_code == 200
    data = response.json()

    assert data["code"] == 200
    assert data["message"] == "success"
    assert data["action"] == "verifySignature"
    assert data["params"] == {"pubKey": "ed25519:xyz", "tosHash": "abc"}
    assert data["result"] == {
        "signee": "0",
        "signeeSignature": "0",
        "trailHash": "0",
        "timestamp": 0,
        "isValid": False,
    }

    assert opener.contract.calls == [
        ("call_view", "validateSignature", ("ed25519:xyz", "abc")),
    ]


def test_verify_signature_recorded(client, opener):
    opener.contract = FakeContract(
        records={
            ("ed25519:xyz", "abc"): [
                "ed25519:xyz",
                "sig123",
                "trail-1",
                1_650_000_000_000_000_000,
            ]
        }
    )

    response = client.get("/verifySignature", params={"pubKey": "ed25519:xyz", "tosHash": "abc"})
    result = response.json()["result"]

    assert result == {
        "signee": "ed25519:xyz",
        "signeeSignature": "sig123",
        "trailHash": "trail-1",
        "timestamp": 1_650_000_000_000,
        "isValid": True,
    }


def test_verify_signature_uses_throwaway_credential(client, opener):
    client.get("/verifySignature", params={"pubKey": "ed25519:xyz", "tosHash": "abc"})

    assert opener.secret_keys == [None]


@pytest.mark.parametrize(
    "params",
    [
        {},
        {"pubKey": "ed25519:xyz"},
        {"tosHash": "abc"},
        {"pubKey": "", "tosHash": "abc"},
        {"pubKey": "ed25519:xyz", "tosHash": ""},
    ],
)
def test_verify_signature_rejects_missing_params(client, opener, params):
    response = client.get("/verifySignature", params=params)

    assert response.status_code == 200
    assert response.json() == {"code": 500, "message": "ERROR", "result": "Missing params!"}
    assert opener.secret_keys == []
    assert opener.contract.calls == []


def test_verify_signature_collaborator_failure(client, opener):
    opener.error = ConnectionError("Gateway serves network 1, expected 31337")

    response = client.get("/verifySignature", params={"pubKey": "ed25519:xyz", "tosHash": "abc"})
    assert response.status_code == 200
    data = response.json()

    assert data["code"] == 500
    assert data["message"] == "ERROR"
    assert data["result"]
    assert json.loads(data["result"])["name"] == "ConnectionError"


def test_verify_signature_malformed_record(client, opener):
    opener.contract = FakeContract(records={("ed25519:xyz", "abc"): ["only", "three", "items"]})

    response = client.get("/verifySignature", params={"pubKey": "ed25519:xyz", "tosHash": "abc"})
    data = response.json()

    assert data["code"] == 500
    assert json.loads(data["result"])["name"] == "ValueError"


def test_health_endpoint(client):
    response = client.get("/test")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
