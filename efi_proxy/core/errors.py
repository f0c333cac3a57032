# efi_proxy/core/errors.py
from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    UPSTREAM_AUTH = "upstream_auth"
    UPSTREAM_OPERATION = "upstream_operation"
    TRANSPORT = "transport"
    INTERNAL = "internal"


class ProxyError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500

    def __init__(self, message: str, *, details: Any = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class AuthorizationError(ProxyError):
    kind = ErrorKind.AUTHORIZATION
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ValidationError(ProxyError):
    """Campo obrigatório ausente. `fields` lista os campos faltantes."""

    kind = ErrorKind.VALIDATION
    status_code = 400

    def __init__(self, fields: list[str]):
        super().__init__(f"Missing {' or '.join(fields)}", details={"fields": fields})
        self.fields = fields


class UpstreamAuthError(ProxyError):
    kind = ErrorKind.UPSTREAM_AUTH
    status_code = 500


class UpstreamOperationError(ProxyError):
    kind = ErrorKind.UPSTREAM_OPERATION


class TransportError(ProxyError):
    kind = ErrorKind.TRANSPORT
    status_code = 500


class CertificateError(TransportError):
    pass
