"""Control gateway: compose, send, then force a status refresh."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .client import CowayIocareClient, envelope_code
from .codes import SUCCESS_CODE
from .composer import ControlCommand, ControlRequest, async_compose_control_request


@dataclass(frozen=True)
class ControlResult:
    """Outcome of a sent control request."""

    request: ControlRequest
    response: dict[str, Any]

    @property
    def accepted(self) -> bool:
        return envelope_code(self.response) == SUCCESS_CODE


class ControlGateway:
    """Issues control requests for one device.

    `refresh` is awaited after every request that reached the vendor, whatever
    the response envelope says, so readers see post-command state. Transport
    and composition failures propagate and skip the refresh.
    """

    def __init__(
        self,
        client: CowayIocareClient,
        *,
        refresh: Callable[[], Awaitable[None]],
    ) -> None:
        self._client = client
        self._refresh = refresh

    async def async_compose(self, commands: Iterable[ControlCommand]) -> ControlRequest:
        return await async_compose_control_request(
            commands,
            device=self._client.device,
            fetch_control_status=self._client.async_fetch_control_status,
        )

    async def async_control(self, commands: Iterable[ControlCommand]) -> ControlResult:
        """Compose and send commands, then refresh.

        Raises:
            CowayIocareCompositionError: If the request could not be composed.
            CowayIocareTransportError: If the control request failed.
        """
        request = await self.async_compose(commands)
        response = await self._client.async_control_device(request)
        await self._refresh()
        return ControlResult(request=request, response=response)
