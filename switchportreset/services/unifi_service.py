"""
Сервис для работы с API контроллера UniFi.

Тонкие обертки над четырьмя эндпоинтами контроллера:
- POST /api/login
- GET  /api/self/sites
- GET  /api/s/{site}/stat/sta
- POST /api/s/{site}/cmd/devmgr

Каждая обертка помечает ошибку шагом, на котором она произошла.
"""
from contextlib import contextmanager
from typing import Iterator, List, Type, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from switchportreset.models.schemas import (
    Client,
    ClientsResponse,
    CommandResponse,
    ResetCommand,
    Site,
    SitesResponse,
)
from switchportreset.services.controller_session import ControllerSession
from switchportreset.utils.errors import (
    ControllerError,
    ControllerStep,
    SchemaError,
    UpstreamStatusError,
)
from switchportreset.utils.logger import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _site_path(site: str, suffix: str) -> str:
    return f"/api/s/{quote(site, safe='')}/{suffix}"


def decode(model: Type[ModelT], body: bytes) -> ModelT:
    """Разбирает тело ответа в модель; невалидный JSON или схема -> SchemaError."""
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        )
        raise SchemaError(problems) from e


class UniFiController:
    """Протокол контроллера поверх одной ControllerSession."""

    def __init__(self, session: ControllerSession):
        self.session = session

    @contextmanager
    def _step(self, step: ControllerStep) -> Iterator[None]:
        try:
            yield
        except ControllerError as e:
            if e.step is None:
                e.step = step
            raise

    async def login(self, username: str, password: str) -> None:
        """Логин; cookie сессии сохраняется в cookie jar."""
        with self._step(ControllerStep.LOGIN):
            await self.session.post_json(
                "/api/login", {"username": username, "password": password}
            )
        logger.debug(f"Logged in to {self.session.base_url} as {username}")

    async def list_sites(self) -> List[Site]:
        with self._step(ControllerStep.SITES):
            _, body = await self.session.get("/api/self/sites")
            return decode(SitesResponse, body).data

    async def list_clients(self, site: str) -> List[Client]:
        with self._step(ControllerStep.CLIENTS):
            _, body = await self.session.get(_site_path(site, "stat/sta"))
            return decode(ClientsResponse, body).data

    async def power_cycle_port(self, site: str, command: ResetCommand) -> CommandResponse:
        """Отправляет devmgr команду power-cycle для порта коммутатора."""
        with self._step(ControllerStep.COMMAND):
            status, body = await self.session.post_json(
                _site_path(site, "cmd/devmgr"), command.model_dump()
            )
            if not body.strip():
                return CommandResponse()
            response = decode(CommandResponse, body)
            if response.rejected:
                raise UpstreamStatusError(status, None, body.decode("utf-8", errors="replace"))
            return response
