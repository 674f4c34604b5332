"""Abstract base class and shared types for generation providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Capability(str, Enum):
    TEXT_TO_IMAGE = "text-to-image"
    IMAGE_TO_IMAGE = "image-to-image"
    TEXT_TO_VIDEO = "text-to-video"
    IMAGE_TO_VIDEO = "image-to-video"


@dataclass(frozen=True)
class ModelPricing:
    type: str  # "per-run" | "per-second" | ...
    amount: float
    currency: str = "USD"

    def to_dict(self) -> dict:
        return {"type": self.type, "amount": self.amount, "currency": self.currency}


@dataclass(frozen=True)
class ProviderModel:
    """A model offered by a provider. ``provider`` is the owning provider's id."""

    id: str  # vendor-qualified, e.g. "wavespeed-ai/flux-dev"
    name: str
    provider: str
    capabilities: frozenset[Capability] = frozenset()
    description: str | None = None
    pricing: ModelPricing | None = None

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match over name, id and description."""
        needle = query.lower()
        return (
            needle in self.name.lower()
            or needle in self.id.lower()
            or (self.description is not None and needle in self.description.lower())
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "provider": self.provider,
            "capabilities": sorted(c.value for c in self.capabilities),
            "pricing": self.pricing.to_dict() if self.pricing else None,
        }


@dataclass
class GenerationInput:
    """Normalized generation request.

    ``parameters`` and ``dynamic_inputs`` are provider-specific option maps;
    each provider validates them, if at all.
    """

    model: str
    prompt: str
    images: list[str] | None = None
    parameters: dict[str, Any] | None = None
    dynamic_inputs: dict[str, Any] | None = None

    def to_payload(self, provider_id: str) -> dict:
        return {
            "provider": provider_id,
            "model": self.model,
            "prompt": self.prompt,
            "images": self.images,
            "parameters": self.parameters,
            "dynamicInputs": self.dynamic_inputs,
        }


@dataclass
class GenerationOutput:
    """Standardized result from any provider.

    ``error`` is set exactly when ``success`` is False. ``payload`` is the
    endpoint's response body, kept verbatim whenever one was received; a body
    that reports its own failure sets both. Failures raised locally carry no
    payload.
    """

    success: bool
    payload: dict[str, Any] | None = None
    error: str | None = None

    @classmethod
    def failure(cls, error: str) -> "GenerationOutput":
        return cls(success=False, error=error)

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> "GenerationOutput":
        """Wrap a response body that already has the output shape, keeping it verbatim."""
        if body.get("success") is False:
            return cls(success=False, payload=body, error=str(body.get("error") or "Generation failed"))
        return cls(success=True, payload=body)

    def to_dict(self) -> dict:
        if self.payload is not None:
            return self.payload
        return {"success": False, "error": self.error}


class GenerationProvider(ABC):
    """Abstract base class for generation providers.

    Catalog calls return empty results while the provider has no credential,
    so a front end can read availability straight from the model list.

    Implementations: WaveSpeedProvider
    """

    @property
    @abstractmethod
    def id(self) -> str:
        """Stable lowercase identifier, unique within a registry."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name used in logs and error messages."""
        ...

    @abstractmethod
    async def list_models(self) -> list[ProviderModel]: ...

    @abstractmethod
    async def search_models(self, query: str) -> list[ProviderModel]: ...

    @abstractmethod
    async def get_model(self, model_id: str) -> ProviderModel | None: ...

    @abstractmethod
    async def generate(self, request: GenerationInput) -> GenerationOutput:
        """Run a generation.

        Never raises: every failure comes back as a failed GenerationOutput.
        """
        ...

    @abstractmethod
    def get_api_key(self) -> str | None: ...

    def is_configured(self) -> bool:
        return bool(self.get_api_key())
