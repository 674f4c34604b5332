"""Build the provider registry from config."""

import logging

from credentials import CredentialAccessor, SettingsStore
from config import settings
from providers.dispatch import GenerationDispatcher
from providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def build_credentials(
    path: str | None = None,
    settings_key: str | None = None,
) -> CredentialAccessor:
    """Create a CredentialAccessor over the configured settings store."""
    store = SettingsStore(path if path is not None else settings.provider_settings_path)
    if not store.available:
        logger.info("Provider settings store not found at %s; providers start unconfigured", store.path)
    return CredentialAccessor(store, settings_key or settings.provider_settings_key)


def build_registry(
    credentials: CredentialAccessor,
    dispatcher: GenerationDispatcher | None = None,
) -> ProviderRegistry:
    """Construct every provider and register it.

    Called once during startup. Supports:
    - wavespeed: WaveSpeed AI (image and video)

    Args:
        credentials: Source of per-provider API keys.
        dispatcher: Shared dispatcher for the local generation endpoint.

    Returns:
        A populated ProviderRegistry.
    """
    from providers.wavespeed import WaveSpeedProvider

    dispatcher = dispatcher or GenerationDispatcher()
    registry = ProviderRegistry()

    registry.register(WaveSpeedProvider(credentials, dispatcher))

    for provider in registry:
        logger.info(
            "Registered provider %s (%s)",
            provider.id,
            "configured" if provider.is_configured() else "not configured",
        )
    return registry


def check_all_providers(registry: ProviderRegistry) -> dict[str, bool]:
    """Report configuration status for every registered provider.

    Returns:
        Dictionary mapping provider id to whether it has a credential.
    """
    results = {}
    for provider in registry:
        try:
            results[provider.id] = provider.is_configured()
        except Exception as e:
            logger.error("Provider %s status check failed: %s", provider.id, e)
            results[provider.id] = False
    return results
