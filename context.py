"""Application context: the long-lived collaborators shared by request handlers."""

from dataclasses import dataclass

from fastapi import Request

from community.proxy import CommunityWorkflowProxy
from credentials import CredentialAccessor
from providers.dispatch import GenerationDispatcher
from providers.factory import build_credentials, build_registry
from providers.registry import ProviderRegistry


@dataclass
class AppContext:
    credentials: CredentialAccessor
    registry: ProviderRegistry
    workflows: CommunityWorkflowProxy


def build_context(
    credentials: CredentialAccessor | None = None,
    dispatcher: GenerationDispatcher | None = None,
    workflows: CommunityWorkflowProxy | None = None,
) -> AppContext:
    """Wire up credentials, providers and the workflow proxy from config."""
    credentials = credentials or build_credentials()
    return AppContext(
        credentials=credentials,
        registry=build_registry(credentials, dispatcher),
        workflows=workflows or CommunityWorkflowProxy(),
    )


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context stored on app.state at startup."""
    return request.app.state.context
