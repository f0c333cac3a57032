# tests/conftest.py
# -*- coding: utf-8 -*-
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from efi_proxy.core.config import Settings
from efi_proxy.main import create_app

SECRET = "s3cr3t"


class FakeEfi:
    """
    Gateway falso: responde por (método, path) e guarda toda requisição recebida.
    Rotas não cadastradas respondem 404.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.prefixes = []
        self.route("POST", "/oauth/token", 200, {"access_token": "tok-123", "token_type": "Bearer"})

    def route(self, method, path, status, body):
        self.routes[(method, path)] = (status, body)

    def route_prefix(self, method, prefix, status, body):
        self.prefixes.append((method, prefix, (status, body)))

    def fail_with(self, method, path, exc):
        self.routes[(method, path)] = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        path = request.url.raw_path.decode()
        entry = self.routes.get((request.method, path))
        if entry is None:
            entry = next(
                (resp for m, prefix, resp in self.prefixes if m == request.method and path.startswith(prefix)),
                None,
            )
        if entry is None:
            return httpx.Response(404, json={"nome": "not_found"})
        if isinstance(entry, Exception):
            raise entry
        status, body = entry
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)

    def paths(self):
        return [c.url.raw_path.decode() for c in self.calls]

    def body_of(self, path):
        for c in self.calls:
            if c.url.raw_path.decode() == path:
                return json.loads(c.content)
        raise AssertionError(f"nenhuma chamada para {path}")


@pytest.fixture
def settings():
    return Settings(
        PROXY_SECRET=SECRET,
        EFI_CLIENT_ID="Client_Id_abc",
        EFI_CLIENT_SECRET="Client_Secret_xyz",
        EFI_CERTIFICATE_BASE64="",
        EFI_PIX_KEY="chave+pix@example.com",
    )


@pytest.fixture
def efi():
    return FakeEfi()


@pytest.fixture
def client(settings, efi):
    app = create_app(settings, transport=httpx.MockTransport(efi.handler))
    return TestClient(app)


@pytest.fixture
def auth():
    return {"x-proxy-secret": SECRET}
