def test_hash_then_verify_over_rpc(cipher_client):
    hashed = cipher_client.post("/v1/rpc/HashCredential", json={"plaintext": "s3cret"}).json()
    assert hashed["statusCode"] == 0
    assert hashed["hash"].startswith(hashed["salt"])

    ok = cipher_client.post(
        "/v1/rpc/VerifyCredential",
        json={"plaintext": "s3cret", "storedHash": hashed["hash"]},
    ).json()
    assert ok == {
        "statusCode": 0,
        "message": "credential verification completed",
        "isValid": True,
    }

    no = cipher_client.post(
        "/v1/rpc/VerifyCredential",
        json={"plaintext": "nope", "storedHash": hashed["hash"]},
    ).json()
    assert no["statusCode"] == 0 and no["isValid"] is False


def test_hash_empty_plaintext(cipher_client):
    r = cipher_client.post("/v1/rpc/HashCredential", json={"plaintext": ""})
    assert r.status_code == 200
    assert r.json() == {
        "statusCode": 8,
        "message": "credential must not be empty",
        "hash": "",
        "salt": "",
    }


def test_verify_missing_candidate(cipher_client):
    r = cipher_client.post(
        "/v1/rpc/VerifyCredential", json={"plaintext": "", "storedHash": "somehash"}
    )
    assert r.json()["statusCode"] == 8


def test_verify_malformed_hash(cipher_client):
    r = cipher_client.post(
        "/v1/rpc/VerifyCredential", json={"plaintext": "s3cret", "storedHash": "somehash"}
    )
    assert r.status_code == 200
    assert r.json()["statusCode"] == 7


def test_authenticate_reset(cipher_client):
    stored = cipher_client.post("/v1/rpc/HashCredential", json={"plaintext": "n3w"}).json()["hash"]

    r = cipher_client.post(
        "/v1/rpc/AuthenticateCredentialReset",
        json={"storedHash": stored, "presentedHash": "n3w"},
    )
    assert r.json()["isAuthenticated"] is True
    assert r.json()["statusCode"] == 0

    r2 = cipher_client.post(
        "/v1/rpc/AuthenticateCredentialReset",
        json={"storedHash": stored, "presentedHash": "old"},
    )
    assert r2.json()["isAuthenticated"] is False


def test_cipher_app_has_no_verification_routes(cipher_client):
    r = cipher_client.post("/v1/rpc/IssueVerificationCode", json={"address": "a@b.com"})
    assert r.status_code == 404
