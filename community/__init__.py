"""Community workflows: two-hop proxy to the remote content store."""

from community.cancellation import CancellationToken
from community.proxy import CommunityWorkflowProxy, DownloadUrlCache, FetchStatus, WorkflowFetchResult

__all__ = [
    "CancellationToken",
    "CommunityWorkflowProxy",
    "DownloadUrlCache",
    "FetchStatus",
    "WorkflowFetchResult",
]
