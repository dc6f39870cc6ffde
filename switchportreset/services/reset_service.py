"""
Port reset orchestration.

Sequence for one incoming request, strictly in order:
login -> list sites -> list clients per site -> match MAC -> power-cycle.

The first wired client whose MAC matches ends the search; at most one
power-cycle command is sent per request. Any controller error stops the
sequence and becomes a failed ResetResponse.
"""

from typing import Callable, Iterable, Optional

from config.settings import Settings
from switchportreset.models.schemas import Client, ResetCommand, ResetResponse
from switchportreset.services.controller_session import ControllerSession
from switchportreset.services.unifi_service import UniFiController
from switchportreset.utils.errors import (
    ControllerError,
    ControllerStep,
    NotFoundError,
    SchemaError,
)
from switchportreset.utils.logger import get_logger

logger = get_logger(__name__)

SessionFactory = Callable[..., ControllerSession]

SUCCESS_MESSAGE = "Successfully reset power to switch port connected to mac address {mac}"


def normalize_mac(mac: str) -> str:
    return mac.lower()


def find_wired_client(clients: Iterable[Client], search_mac: str) -> Optional[Client]:
    """First wired client with a matching MAC; wireless clients have no switch port."""
    for client in clients:
        if normalize_mac(client.mac) == search_mac and client.is_wired:
            return client
    return None


def build_reset_command(client: Client) -> ResetCommand:
    if client.sw_mac is None or client.sw_port is None:
        missing = "sw_mac" if client.sw_mac is None else "sw_port"
        raise SchemaError(
            f"wired client {client.mac} has no {missing}", step=ControllerStep.CLIENTS
        )
    return ResetCommand(mac=client.sw_mac, port_idx=client.sw_port)


async def _power_cycle(
    search_mac: str, settings: Settings, session_factory: SessionFactory
) -> None:
    async with session_factory(
        settings.baseurl,
        timeout=settings.request_timeout,
        verify_ssl=settings.verify_ssl,
    ) as session:
        controller = UniFiController(session)
        await controller.login(settings.username, settings.password)

        sites = await controller.list_sites()
        logger.debug(f"Controller reported {len(sites)} site(s)")

        for site in sites:
            clients = await controller.list_clients(site.name)
            client = find_wired_client(clients, search_mac)
            if client is None:
                continue

            command = build_reset_command(client)
            logger.info(
                f"Found {search_mac} on site '{site.name}', switch {command.mac} "
                f"port {command.port_idx}; sending {command.cmd}"
            )
            await controller.power_cycle_port(site.name, command)
            return

    raise NotFoundError(search_mac)


async def reset_switch_port(
    search_mac: str,
    settings: Settings,
    session_factory: SessionFactory = ControllerSession,
) -> ResetResponse:
    """
    Power-cycles the switch port that the wired client ``search_mac`` is on.

    Always returns exactly one ResetResponse; controller errors are logged
    and reported through ``message``, never raised.
    """
    search_mac = normalize_mac(search_mac)

    try:
        await _power_cycle(search_mac, settings, session_factory)
    except NotFoundError as e:
        logger.info(e.message)
        return ResetResponse(success=False, message=e.message)
    except ControllerError as e:
        logger.error(e.message)
        return ResetResponse(success=False, message=e.message)

    message = SUCCESS_MESSAGE.format(mac=search_mac)
    logger.info(message)
    return ResetResponse(success=True, message=message)
