"""
GitHub git provider package.

Re-exports the provider facade and the host-facing bridge types.
Usage: `from remotegit.providers.github import GitHubGitProvider`

Module structure:
- provider.py: Session, repository context and host signals
- branches.py, tags.py, remotes.py: Refs of a repository
- commits.py: Commits, logs and file logs
- contributors.py: Contributors, from the contributors list or from history
- blame.py: Whole-file, line and range blame
- diff.py: Comparisons between refs
- graph.py: Commit graph rows
- revision.py: Reference resolution
- search.py: Commit search
- discovery.py: Polling for repositories whose provider is not registered yet
- remotehub.py: Protocols and types of the host bridge
- converters.py: GitHub payloads to git models
"""

from remotegit.providers.github.blame import get_blame_range
from remotegit.providers.github.provider import (
    PROVIDER_ID,
    GitHubGitProvider,
    RepositoryContext,
    ensure_provider_loaded,
)
from remotegit.providers.github.remotehub import (
    AuthenticationProvider,
    AuthenticationSession,
    AuthenticationSessionAccount,
    HeadType,
    ProviderInfo,
    RemoteHubApi,
    RepositoryMetadata,
    RepositoryRef,
    RepositoryRefType,
    Revision,
    Storage,
)

__all__ = [
    # Provider
    "GitHubGitProvider",
    "RepositoryContext",
    "PROVIDER_ID",
    "ensure_provider_loaded",
    # Utilities
    "get_blame_range",
    # Bridge types
    "AuthenticationProvider",
    "AuthenticationSession",
    "AuthenticationSessionAccount",
    "HeadType",
    "ProviderInfo",
    "RemoteHubApi",
    "RepositoryMetadata",
    "RepositoryRef",
    "RepositoryRefType",
    "Revision",
    "Storage",
]
