"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: a scripted transport for poller and
client tests, plus a few builders for wire payloads.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from multidict import CIMultiDict, CIMultiDictProxy

LOCATION = "Operation-location"
APP_ID = "7a8d3b5e-1c2f-4e6a-9b0d-3f4e5a6b7c8d"
PREDICTION_KEY = "test-prediction-key"


def headers(*pairs: tuple[str, str]) -> CIMultiDictProxy[str]:
    """Build read-only response headers, allowing repeated names."""
    return CIMultiDictProxy(CIMultiDict(pairs))


def location(uri: str) -> CIMultiDictProxy[str]:
    return headers((LOCATION, uri))


@dataclass
class Reply:
    """One scripted transport response."""

    body: Any = None
    headers: CIMultiDictProxy[str] = field(default_factory=headers)


def status(value: str, result_uri: str | None = None) -> Reply:
    """A poll response with the given status, optionally carrying a result location."""
    return Reply({"status": value}, location(result_uri) if result_uri else headers())


@dataclass
class Call:
    method: str
    uri: str
    json: Any = None
    data: Any = None


@dataclass
class ScriptedTransport:
    """Transport double that returns a scripted sequence of replies/exceptions.

    Every call pops the next item of ``script``; a BaseException is raised,
    a Reply is returned with its body passed through the requested shape.
    """

    script: list[Reply | BaseException] = field(default_factory=list)
    calls: list[Call] = field(default_factory=list)
    closed: bool = False

    async def get(self, uri: str, shape: Any = None) -> tuple[Any, CIMultiDictProxy[str]]:
        self.calls.append(Call("GET", uri))
        return self._next(shape)

    async def post(
        self,
        uri: str,
        *,
        json: Any = None,
        data: Any = None,
        shape: Any = None,
    ) -> tuple[Any, CIMultiDictProxy[str]]:
        self.calls.append(Call("POST", uri, json=json, data=data))
        return self._next(shape)

    async def close(self) -> None:
        self.closed = True

    def _next(self, shape: Any) -> tuple[Any, CIMultiDictProxy[str]]:
        if not self.script:
            raise AssertionError("ScriptedTransport ran out of scripted replies")
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        if shape is None:
            return None, item.headers
        return shape(item.body), item.headers

    @property
    def methods(self) -> list[str]:
        return [call.method for call in self.calls]


@dataclass
class RecordingSleep:
    """Sleep double recording requested delays without waiting."""

    delays: list[float] = field(default_factory=list)

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


def prediction_body(
    *,
    positive: list[str] | None = None,
    classifiers: dict[str, Any] | None = None,
    extractors: Any = None,
) -> dict[str, Any]:
    """Final prediction payload as returned by the result location."""
    return {
        "prediction": {
            "positiveClassifiers": positive if positive is not None else [],
            "classifiers": classifiers if classifiers is not None else {},
            "extractors": extractors,
        }
    }
