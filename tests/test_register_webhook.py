# tests/test_register_webhook.py
import httpx

WEBHOOK_PATH = "/v2/webhook/chave%2Bpix%40example.com"


def test_register_webhook_success(client, efi, auth):
    efi.route("PUT", WEBHOOK_PATH, 200, {"webhookUrl": "https://example.com/hook"})

    resp = client.post("/register-webhook", json={"webhook_url": "https://example.com/hook"}, headers=auth)

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": {"webhookUrl": "https://example.com/hook"}}
    call = efi.calls[-1]
    assert call.headers["x-skip-mtls-checking"] == "true"
    assert call.headers["authorization"] == "Bearer tok-123"
    assert efi.body_of(WEBHOOK_PATH) == {"webhookUrl": "https://example.com/hook"}


def test_register_webhook_missing_url(client, efi, auth):
    resp = client.post("/register-webhook", json={"webhook_url": ""}, headers=auth)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing webhook_url"
    assert efi.calls == []


def test_register_webhook_without_body(client, efi, auth):
    resp = client.post("/register-webhook", headers=auth)
    assert resp.status_code == 400
    assert efi.calls == []


def test_register_webhook_upstream_error(client, efi, auth):
    efi.route("PUT", WEBHOOK_PATH, 400, {"nome": "webhook_invalido"})

    resp = client.post("/register-webhook", json={"webhook_url": "http://x"}, headers=auth)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Webhook failed", "details": {"nome": "webhook_invalido"}}


def test_register_webhook_oauth_failure(client, efi, auth):
    efi.route("POST", "/oauth/token", 500, "upstream down")

    resp = client.post("/register-webhook", json={"webhook_url": "http://x"}, headers=auth)

    assert resp.status_code == 500
    assert resp.json() == {"error": "EFI auth failed", "details": "upstream down"}
    assert efi.paths() == ["/oauth/token"]


def test_register_webhook_network_failure(client, efi, auth):
    efi.fail_with("PUT", WEBHOOK_PATH, httpx.ConnectError("TLS handshake failed"))

    resp = client.post("/register-webhook", json={"webhook_url": "http://x"}, headers=auth)

    assert resp.status_code == 500
    assert resp.json() == {"error": "TLS handshake failed"}
