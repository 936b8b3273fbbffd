"""Pytest configuration and fixtures.

Provides settings isolation, logging configuration and a fake LUIS service
served by a local aiohttp test server.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from luis_predict.config import Settings
from tests.helpers import APP_ID, PREDICTION_KEY

# =============================================================================
# Settings Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def isolate_settings(monkeypatch, tmp_path):
    """Give every test a known, complete configuration.

    Settings reads the environment once at import; tests override the class
    attributes instead of the environment.
    """
    monkeypatch.setattr(Settings, "LUIS_ENDPOINT_BASE_URI", "https://luis.example.test/")
    monkeypatch.setattr(Settings, "LUIS_PREDICTION_KEY", PREDICTION_KEY)
    monkeypatch.setattr(Settings, "LUIS_APP_ID", APP_ID)
    monkeypatch.setattr(Settings, "LUIS_MODEL_SLOT", "production")
    monkeypatch.setattr(Settings, "LUIS_POLL_INTERVAL", "0.01")
    monkeypatch.setattr(Settings, "TEST_FILES_FOLDER", str(tmp_path / "test_files"))
    monkeypatch.setattr(Settings, "OUTPUT_FOLDER", None)
    monkeypatch.setattr(Settings, "OUTPUT_STATS_FILE", None)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


# =============================================================================
# Fake LUIS service
# =============================================================================

CONVERT_ROUTE = "/luis/prediction/v4.0-preview/documents/convert"
PREDICT_ROUTE = (
    "/luis/prediction/v4.0-preview/documents/apps/{app_id}/slots/{slot}/predictText"
)


@dataclass
class FakeLuisService:
    """In-process stand-in for the document prediction endpoint.

    Each started operation reports ``running`` for ``running_polls`` polls,
    then ``succeeded`` with the result location. ``failures`` maps a stage
    ('start', 'poll' or 'fetch') to the (status, body) returned instead.
    """

    chunks: list[str] = field(default_factory=lambda: ["first chunk", "second chunk"])
    prediction: dict[str, Any] = field(
        default_factory=lambda: {
            "prediction": {
                "positiveClassifiers": ["Order"],
                "classifiers": {"Order": {"score": 0.93}, "Refund": {"score": 0.04}},
                "extractors": {
                    "item": ["burrito"],
                    "$instance": {"item": [{"text": "burrito", "startIndex": 10}]},
                },
            }
        }
    )
    running_polls: int = 1
    failures: dict[str, tuple[int, str]] = field(default_factory=dict)
    final_status: str = "succeeded"
    requests: list[dict[str, Any]] = field(default_factory=list)
    uploads: list[dict[str, Any]] = field(default_factory=list)
    predict_bodies: list[Any] = field(default_factory=list)
    polls: dict[str, int] = field(default_factory=dict)

    def build_app(self) -> web.Application:
        app = web.Application(middlewares=[self._record])
        app.router.add_post(CONVERT_ROUTE, self.start_convert)
        app.router.add_post(PREDICT_ROUTE, self.start_predict)
        app.router.add_get("/operations/{operation_id}", self.poll)
        app.router.add_get("/results/{operation_id}", self.fetch)
        return app

    @web.middleware
    async def _record(self, request: web.Request, handler):
        self.requests.append(
            {
                "method": request.method,
                "path": request.path,
                "query": dict(request.query),
                "headers": dict(request.headers),
            }
        )
        return await handler(request)

    def _failure(self, stage: str) -> web.Response | None:
        if stage not in self.failures:
            return None
        status_code, body = self.failures[stage]
        return web.Response(status=status_code, text=body)

    @staticmethod
    def _absolute(request: web.Request, path: str) -> str:
        return str(request.url.origin().with_path(path))

    def _accepted(self, request: web.Request, operation_id: str) -> web.Response:
        self.polls[operation_id] = 0
        return web.json_response(
            {},
            status=202,
            headers={"Operation-location": self._absolute(request, f"/operations/{operation_id}")},
        )

    async def start_convert(self, request: web.Request) -> web.Response:
        failure = self._failure("start")
        if failure is not None:
            return failure
        reader = await request.multipart()
        part = await reader.next()
        self.uploads.append(
            {"name": part.name, "filename": part.filename, "content": await part.read()}
        )
        return self._accepted(request, f"convert-{len(self.uploads)}")

    async def start_predict(self, request: web.Request) -> web.Response:
        failure = self._failure("start")
        if failure is not None:
            return failure
        self.predict_bodies.append(await request.json())
        return self._accepted(request, f"predict-{len(self.predict_bodies)}")

    async def poll(self, request: web.Request) -> web.Response:
        failure = self._failure("poll")
        if failure is not None:
            return failure
        operation_id = request.match_info["operation_id"]
        self.polls[operation_id] = self.polls.get(operation_id, 0) + 1
        if self.polls[operation_id] <= self.running_polls:
            return web.json_response({"status": "running"})
        if self.final_status != "succeeded":
            return web.json_response({"status": self.final_status})
        return web.json_response(
            {"status": "succeeded"},
            headers={"Operation-location": self._absolute(request, f"/results/{operation_id}")},
        )

    async def fetch(self, request: web.Request) -> web.Response:
        failure = self._failure("fetch")
        if failure is not None:
            return failure
        operation_id = request.match_info["operation_id"]
        if operation_id.startswith("convert"):
            return web.json_response({"documentText": json.dumps(self.chunks)})
        return web.json_response(self.prediction)


@pytest.fixture
def luis_service() -> FakeLuisService:
    return FakeLuisService()


@pytest_asyncio.fixture
async def luis_server(luis_service):
    """Serve the fake LUIS service; yields the running TestServer."""
    async with TestServer(luis_service.build_app()) as server:
        yield server
