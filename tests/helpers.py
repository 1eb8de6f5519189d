"""Shared test utilities for metasys-py tests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

import orjson

from metasys_py.app.application import ClientConfig, MetasysApplication
from metasys_py.localization.resources import MappingResourceProvider
from metasys_py.localization.translator import EnumTranslator
from metasys_py.transport import HttpResponse

BASE_URL = "https://nae.test/api/v2"

OBJ_A = UUID("11111111-1111-1111-1111-111111111111")
OBJ_B = UUID("22222222-2222-2222-2222-222222222222")
OBJ_C = UUID("33333333-3333-3333-3333-333333333333")

EN = {
    "reliabilityEnumSet.reliable": "Reliable",
    "reliabilityEnumSet.overRange": "Over Range",
    "writePriorityEnumSet.priorityDefault": "16 (Default)",
    "statusEnumSet.unsupportedObjectType": "Unsupported Object Type",
    "dataTypeEnumSet.arrayDataType": "Array",
    "binarypvEnumSet.bacbinActive": "Active",
    "commandIdEnumSet.adjustCommand": "Adjust",
    "commandIdEnumSet.releaseCommand": "Release",
    "objectTypeEnumSet.avClass": "Analog Value",
    "objectTypeEnumSet.deviceClass": "Device",
    "objectTypeEnumSet.bacnetDeviceClass": "Device",
    "objectTypeEnumSet.naeClass": "NAE",
}

DE = {
    "reliabilityEnumSet.reliable": "Zuverlässig",
    "writePriorityEnumSet.priorityDefault": "16 (Standard)",
    "statusEnumSet.unsupportedObjectType": "Nicht unterstützter Objekttyp",
    "binarypvEnumSet.bacbinActive": "Aktiv",
    "commandIdEnumSet.adjustCommand": "Anpassen",
    "objectTypeEnumSet.avClass": "Analogwert",
}


def make_resources() -> MappingResourceProvider:
    return MappingResourceProvider({"en-US": EN, "de-DE": DE})


def make_translator() -> EnumTranslator:
    return EnumTranslator(make_resources())


def token_payload(token: str, expires: str = "2099-01-01T00:00:00Z") -> dict[str, str]:
    return {"accessToken": token, "expires": expires}


def page(items: list[Any], *, next_url: str | None = None, total: int | None = None) -> dict:
    payload: dict[str, Any] = {"items": items, "next": next_url}
    payload["total"] = len(items) if total is None else total
    return payload


def node(object_id: UUID | str, name: str) -> dict[str, str]:
    return {
        "id": str(object_id),
        "itemReference": f"site:NAE-1/{name}",
        "name": name,
        "description": f"{name} description",
    }


@dataclass
class RecordedRequest:
    method: str
    url: str
    headers: dict[str, str]
    params: dict[str, str]
    body: bytes | None

    @property
    def json(self) -> Any:
        return orjson.loads(self.body) if self.body is not None else None


@dataclass
class _Route:
    responses: list[HttpResponse | BaseException] = field(default_factory=list)


class FakeTransport:
    """Scripted HTTP transport.

    Responses are registered per method, path and (optionally) query
    parameters.  Several responses for the same route are returned in
    order, the last one repeating.  Unregistered routes answer 404.
    Requests complete without suspending, so concurrent callers finish
    in the order they were started.
    """

    def __init__(self, base_url: str = BASE_URL) -> None:
        self._base_url = base_url
        self._routes: dict[tuple[str, str, tuple[tuple[str, str], ...]], _Route] = {}
        self.calls: list[RecordedRequest] = []
        self.started = False
        self.stopped = False

    @property
    def base_url(self) -> str:
        return self._base_url

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True

    def add(
        self,
        method: str,
        path: str,
        payload: Any = None,
        *,
        status: int = 200,
        params: dict[str, Any] | None = None,
        raw: bytes | None = None,
        error: BaseException | None = None,
    ) -> None:
        key = (method, path, _freeze(params))
        route = self._routes.setdefault(key, _Route())
        if error is not None:
            route.responses.append(error)
            return
        if raw is None:
            raw = b"" if payload is None else orjson.dumps(payload)
        route.responses.append(HttpResponse(status=status, body=raw, url=path))

    def requests_to(self, method: str, path: str) -> list[RecordedRequest]:
        return [c for c in self.calls if c.method == method and c.url == path]

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Any = None,
        params: Any = None,
        body: bytes | None = None,
    ) -> HttpResponse:
        frozen = _freeze(params)
        self.calls.append(
            RecordedRequest(method, url, dict(headers or {}), dict(frozen), body)
        )
        route = self._routes.get((method, url, frozen)) or self._routes.get((method, url, ()))
        if route is None or not route.responses:
            return HttpResponse(status=404, body=b"", url=url)
        response = route.responses[0] if len(route.responses) == 1 else route.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


class SlowTransport(FakeTransport):
    """FakeTransport whose requests suspend before answering.

    Each request sleeps for *delay* seconds, or for the delay registered
    for its path in :attr:`delays`.  Peak concurrency and the order in
    which requests finish are recorded.
    """

    def __init__(self, base_url: str = BASE_URL, delay: float = 0.01) -> None:
        super().__init__(base_url)
        self.delay = delay
        self.delays: dict[str, float] = {}
        self.in_flight = 0
        self.peak_in_flight = 0
        self.finished: list[str] = []

    async def request(self, method: str, url: str, **kwargs: Any) -> HttpResponse:
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(url, self.delay))
            return await super().request(method, url, **kwargs)
        finally:
            self.in_flight -= 1
            self.finished.append(url)


def _freeze(params: dict[str, Any] | None) -> tuple[tuple[str, str], ...]:
    if not params:
        return ()
    return tuple(sorted((str(k), str(v)) for k, v in params.items()))


def make_app(
    transport: FakeTransport | None = None,
    **options: Any,
) -> tuple[MetasysApplication, FakeTransport]:
    transport = transport or FakeTransport()
    options.setdefault("auto_refresh", False)
    config = ClientConfig(hostname="nae.test", **options)
    app = MetasysApplication(config, transport=transport, resources=make_resources())
    return app, transport
