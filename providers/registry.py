"""Provider registry: provider id -> provider instance."""

import logging
from collections.abc import Iterator

from providers.base import GenerationProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Holds the providers available to the application.

    Built once at startup by ``providers.factory.build_registry`` and read
    afterwards. Registering an id twice replaces the earlier provider.
    """

    def __init__(self):
        self._providers: dict[str, GenerationProvider] = {}

    def register(self, provider: GenerationProvider) -> None:
        if provider.id in self._providers:
            logger.warning("Replacing registered provider: %s", provider.id)
        self._providers[provider.id] = provider

    def get(self, provider_id: str) -> GenerationProvider | None:
        return self._providers.get(provider_id)

    def ids(self) -> list[str]:
        return list(self._providers)

    def all(self) -> list[GenerationProvider]:
        return list(self._providers.values())

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def __iter__(self) -> Iterator[GenerationProvider]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._providers)
