import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from shared.clients.dms.DMSClientInterface import DMSClientInterface
from shared.helper.HelperConfig import HelperConfig


@dataclass(frozen=True)
class ToolDefinition:
    """
    A tool as it is registered on the MCP server.

    Attributes:
        name (str): The tool name shown to the agent.
        handler (Callable): The bound coroutine implementing the tool. Its signature becomes the input schema.
        description (str): What the tool does, shown to the agent.
        read_only (bool): The tool never changes data.
        destructive (bool): The tool may permanently remove data.
    """
    name: str
    handler: Callable[..., Awaitable[Any]]
    description: str
    read_only: bool = False
    destructive: bool = False


def drop_unset(data: dict[str, Any]) -> dict[str, Any]:
    """
    Returns the entries whose value is not None, so unset arguments are not sent at all.
    """
    return {key: value for key, value in data.items() if value is not None}


def build_query_params(**params: Any) -> dict[str, Any]:
    return drop_unset(params)


def to_json(payload: Any) -> str:
    return json.dumps(payload)


class ToolInterface(ABC):
    def __init__(self, helper_config: HelperConfig, dms_client: DMSClientInterface):
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        self._dms = dms_client

    ##########################################
    ################ GETTER ##################
    ##########################################

    @abstractmethod
    def get_tool_definitions(self) -> list[ToolDefinition]:
        """
        Returns all tools this class provides, ready to be registered on the server.

        Returns:
            list[ToolDefinition]: The tool definitions.
        """
        pass
