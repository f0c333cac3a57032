# efi_proxy/core/result.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from fastapi.responses import JSONResponse

from efi_proxy.core.errors import ErrorKind, ProxyError


@dataclass(frozen=True)
class Success:
    payload: Any
    status_code: int = 200


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    status_code: int
    details: Any = None

    @classmethod
    def from_error(cls, exc: ProxyError) -> "Failure":
        return cls(kind=exc.kind, message=exc.message, status_code=exc.status_code, details=exc.details)

    def body(self) -> dict:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


Result = Union[Success, Failure]


def render(result: Result) -> JSONResponse:
    if isinstance(result, Success):
        return JSONResponse(status_code=result.status_code, content=result.payload)
    return JSONResponse(status_code=result.status_code, content=result.body())
