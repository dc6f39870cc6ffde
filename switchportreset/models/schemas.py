"""
Pydantic модели для API и ответов UniFi контроллера
"""

from typing import Literal

from pydantic import BaseModel

POWER_CYCLE = "power-cycle"


class ResetResponse(BaseModel):
    """Ответ сервиса на запрос сброса порта"""

    success: bool
    message: str

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "message": "Successfully reset power to switch port connected to mac address aa:bb:cc:dd:ee:ff",
            }
        }


class Site(BaseModel):
    """Сайт контроллера; name используется в путях /api/s/{site}/..."""

    name: str


class Client(BaseModel):
    """Клиент сайта. У беспроводных клиентов нет sw_mac/sw_port."""

    mac: str
    is_wired: bool
    sw_mac: str | None = None
    sw_port: int | None = None


class SitesResponse(BaseModel):
    data: list[Site]


class ClientsResponse(BaseModel):
    data: list[Client]


class Meta(BaseModel):
    rc: str | None = None
    msg: str | None = None


class CommandResponse(BaseModel):
    """Ответ /cmd/devmgr; пустое тело тоже считается успехом"""

    meta: Meta | None = None
    data: list = []

    @property
    def rejected(self) -> bool:
        return self.meta is not None and self.meta.rc == "error"


class ResetCommand(BaseModel):
    """Команда power-cycle для одного порта коммутатора"""

    mac: str
    port_idx: int
    cmd: Literal["power-cycle"] = POWER_CYCLE
