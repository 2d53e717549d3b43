"""Base protocol for discovery pipeline handlers."""

from typing import Protocol, TypeVar

from brp_bridge.core.exceptions import BrpBridgeError
from brp_bridge.core.types import Result

# Contravariant input (handlers can accept supertypes), invariant output
T_In = TypeVar("T_In", contravariant=True)
T_Out = TypeVar("T_Out")
T_Error = TypeVar("T_Error", bound=BrpBridgeError)


class BaseAsyncHandler(Protocol[T_In, T_Out, T_Error]):
    """Protocol for asynchronous discovery stages.

    Each handler takes the state produced by the previous stage and returns
    the next one, so every stage can be tested on its own.
    """

    stage_name: str

    async def handle(self, command: T_In) -> Result[T_Out, T_Error]:
        """Process a command state.

        Args:
            command: The state produced by the previous stage.

        Returns:
            A Result holding either the next state or an error.
        """
        ...
