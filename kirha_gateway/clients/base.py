"""
Capability interface for the remote tool provider.
The orchestration layer depends on this protocol, never on the HTTP client.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from kirha_gateway.models import Tool, ToolExecutionResult


@runtime_checkable
class KirhaToolClient(Protocol):
    """
    Protocol defining the two remote operations of the gateway.
    The HTTP client and test doubles must implement this interface.
    """

    async def list_tools(self) -> list[Tool]:
        """
        Fetch the tool catalog of the configured vertical.

        Every call re-fetches; nothing is cached.

        Returns:
            Tools in the order returned by the remote API
        """
        ...

    async def execute_tool(
        self,
        name: str,
        arguments: Mapping[str, Any],
    ) -> ToolExecutionResult:
        """
        Execute a tool remotely.

        Args:
            name: Tool name as exposed to protocol clients
            arguments: Keyed tool arguments

        Returns:
            The execution result

        Raises:
            KirhaGatewayError: With the partial ``result`` attached whenever
                the attempt got far enough to be timed
        """
        ...
