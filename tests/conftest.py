"""
Pytest configuration and fixtures for SwitchPortReset tests.
"""

import asyncio
import os
import sys
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import Settings


# ============================================================================
# Stub UniFi Controller
# ============================================================================

SESSION_COOKIE = "unifises"
SESSION_VALUE = "x"

LOGIN_REQUIRED = {"meta": {"rc": "error", "msg": "api.err.LoginRequired"}, "data": []}
OK = {"meta": {"rc": "ok"}, "data": []}


def wired_client(mac: str, sw_mac: str = "11:22:33:44:55:66", sw_port: Any = 7) -> Dict[str, Any]:
    return {"mac": mac, "is_wired": True, "sw_mac": sw_mac, "sw_port": sw_port}


def wireless_client(mac: str) -> Dict[str, Any]:
    return {"mac": mac, "is_wired": False, "ap_mac": "77:88:99:aa:bb:cc"}


class StubController:
    """
    In-process controller speaking the four endpoints the service uses.

    Records every request so tests can assert on what was (not) sent.
    """

    def __init__(self):
        self.base_url = ""
        self.sites: List[Dict[str, Any]] = [{"name": "default"}]
        self.clients: Dict[str, List[Dict[str, Any]]] = {"default": []}

        self.login_status = 200
        self.login_body: Dict[str, Any] = OK
        self.sites_raw: Optional[str] = None
        self.drop_sites_connection = False
        self.sites_delay = 0.0
        self.command_status = 200
        self.command_body: Any = OK

        self.requests: List[Dict[str, Any]] = []
        self.commands: List[Dict[str, Any]] = []

    # ---------------------------------------------------------------- helpers

    def _record(self, request: web.Request, body: Any = None) -> None:
        self.requests.append({
            "method": request.method,
            "path": request.path,
            "cookies": dict(request.cookies),
            "origin": request.headers.get("Origin"),
            "content_type": request.headers.get("Content-Type", ""),
            "body": body,
        })

    def _authorized(self, request: web.Request) -> bool:
        return request.cookies.get(SESSION_COOKIE) == SESSION_VALUE

    @property
    def paths(self) -> List[str]:
        return [r["path"] for r in self.requests]

    # --------------------------------------------------------------- handlers

    async def login(self, request: web.Request) -> web.StreamResponse:
        body = await request.json()
        self._record(request, body)

        if not request.headers.get("Origin"):
            return web.json_response({"meta": {"rc": "error", "msg": "api.err.Invalid"}}, status=403)
        if self.login_status != 200:
            return web.json_response(self.login_body, status=self.login_status)

        response = web.json_response(OK)
        response.set_cookie(SESSION_COOKIE, SESSION_VALUE)
        return response

    async def list_sites(self, request: web.Request) -> web.StreamResponse:
        self._record(request)
        if self.drop_sites_connection:
            request.transport.close()
            return web.Response()
        if self.sites_delay:
            await asyncio.sleep(self.sites_delay)
        if not self._authorized(request):
            return web.json_response(LOGIN_REQUIRED, status=401)
        if self.sites_raw is not None:
            return web.Response(text=self.sites_raw, content_type="application/json")
        return web.json_response({"meta": {"rc": "ok"}, "data": self.sites})

    async def list_clients(self, request: web.Request) -> web.StreamResponse:
        self._record(request)
        if not self._authorized(request):
            return web.json_response(LOGIN_REQUIRED, status=401)
        site = request.match_info["site"]
        if site not in self.clients:
            return web.json_response({"meta": {"rc": "error", "msg": "api.err.NoSiteContext"}}, status=400)
        return web.json_response({"meta": {"rc": "ok"}, "data": self.clients[site]})

    async def devmgr(self, request: web.Request) -> web.StreamResponse:
        body = await request.json()
        self._record(request, body)
        if not self._authorized(request):
            return web.json_response(LOGIN_REQUIRED, status=401)
        self.commands.append({"site": request.match_info["site"], "body": body})
        if isinstance(self.command_body, str):
            return web.Response(text=self.command_body, status=self.command_status)
        return web.json_response(self.command_body, status=self.command_status)

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/api/login", self.login)
        app.router.add_get("/api/self/sites", self.list_sites)
        app.router.add_get("/api/s/{site}/stat/sta", self.list_clients)
        app.router.add_post("/api/s/{site}/cmd/devmgr", self.devmgr)
        return app


@pytest_asyncio.fixture
async def controller():
    """Running stub controller; ``controller.base_url`` points at it."""
    stub = StubController()
    server = TestServer(stub.make_app())
    await server.start_server()
    stub.base_url = f"http://{server.host}:{server.port}"
    try:
        yield stub
    finally:
        await server.close()


# ============================================================================
# Settings
# ============================================================================


@pytest.fixture
def make_settings():
    """Builds Settings pointing at a given controller URL."""

    def _make(base_url: str, **overrides) -> Settings:
        values = {
            "baseurl": base_url,
            "username": "admin",
            "password": "secret",
            "request_timeout": 5.0,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def settings(controller, make_settings) -> Settings:
    return make_settings(controller.base_url)
