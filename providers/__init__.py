"""Provider abstraction layer for image and video generation.

Each vendor is adapted to one contract (list/search/get models, generate)
and looked up by id through a ProviderRegistry built at startup.
"""

from providers.base import (
    Capability,
    GenerationInput,
    GenerationOutput,
    GenerationProvider,
    ModelPricing,
    ProviderModel,
)
from providers.dispatch import GenerationDispatcher
from providers.registry import ProviderRegistry
from providers.factory import build_credentials, build_registry, check_all_providers

__all__ = [
    "Capability",
    "GenerationInput",
    "GenerationOutput",
    "GenerationProvider",
    "ModelPricing",
    "ProviderModel",
    "GenerationDispatcher",
    "ProviderRegistry",
    "build_credentials",
    "build_registry",
    "check_all_providers",
]
