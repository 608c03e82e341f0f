import warnings
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

from mvpb.domain.models.chat_message import ChatMessage


class StreamProvider(ABC):
    """A source of model output delivered as ordered text deltas.

    Exhausting the iterator returned by astream() means the stream ended
    normally; raising ProviderError means it failed. Timeouts and retries
    are the provider's business, never the consuming session's.
    """

    @classmethod
    def get_metadata(cls) -> dict[str, Any]:
        """Describe the provider for the `providers` command.

        Keys: name, description, requires_config, config_keys,
        supports_system_prompt, supports_history.
        """
        return {
            "name": cls.__name__,
            "description": "",
            "requires_config": False,
            "config_keys": [],
            "supports_system_prompt": False,
            "supports_history": False,
        }

    @abstractmethod
    def validate(self) -> None:
        """Fail fast, before streaming, if the provider cannot run.

        Raises:
            ProviderError: Missing credentials, binaries or input files
        """

    @abstractmethod
    def astream(
        self,
        prompt: str,
        system_prompt: str | None = None,
        history: list[ChatMessage] | None = None,
    ) -> AsyncIterator[str]:
        """Yield the reply to prompt piece by piece.

        Args:
            prompt: The user's message for this request
            system_prompt: Instructions for providers that accept them
            history: Earlier turns of the same session, oldest first

        Raises:
            ProviderError: If the call fails mid-way (network, auth, ...)
        """

    def _warn_unknown_keys(self, config: dict[str, Any]) -> None:
        unknown = sorted(set(config) - set(self.get_metadata()["config_keys"]))
        if unknown:
            warnings.warn(
                f"Unknown {type(self).__name__} config keys ignored: {unknown}",
                UserWarning,
                stacklevel=4,
            )
