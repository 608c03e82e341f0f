from typing import Any

from .stream_provider import StreamProvider


class ProviderFactory:
    """Registry of stream provider classes keyed by a short name.

    create() always builds a fresh instance from the given config, so each
    session gets its own client and nothing is shared at module level.
    """

    _registry: dict[str, type[StreamProvider]] = {}

    @classmethod
    def register(cls, key: str, provider_class: type[StreamProvider]) -> None:
        """Register (or replace) the provider class for key."""
        cls._registry[key] = provider_class

    @classmethod
    def create(cls, provider_key: str, config: dict[str, Any] | None = None) -> StreamProvider:
        """Instantiate the provider registered under provider_key.

        Raises:
            KeyError: If nothing is registered under provider_key; the
                message lists the registered keys.
        """
        try:
            provider_class = cls._registry[provider_key]
        except KeyError:
            known = ", ".join(cls._registry)
            raise KeyError(
                f"Provider: '{provider_key}' not found. Available providers: {known}"
            ) from None
        return provider_class(dict(config or {}))

    @classmethod
    def list_providers(cls) -> list[str]:
        return list(cls._registry)

    @classmethod
    def get_metadata(cls, provider_key: str) -> dict[str, Any] | None:
        """Metadata for one provider, or None if the key is unknown."""
        provider_class = cls._registry.get(provider_key)
        return provider_class.get_metadata() if provider_class is not None else None

    @classmethod
    def get_all_metadata(cls) -> list[dict[str, Any]]:
        """Metadata for every registered provider, in registration order."""
        return [provider_class.get_metadata() for provider_class in cls._registry.values()]
