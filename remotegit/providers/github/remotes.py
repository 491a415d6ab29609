"""Remotes of a remote-backed repository: always a single synthetic `origin`."""

import logging
from typing import TYPE_CHECKING

from remotegit.git.cache import GitCache
from remotegit.git.models import GitRemote
from remotegit.providers.github.branches import REMOTE_NAME

if TYPE_CHECKING:
    from remotegit.providers.github.provider import GitHubGitProvider

logger = logging.getLogger(__name__)

GITHUB_DOMAIN = "github.com"


class RemotesSubProvider:
    def __init__(self, provider: "GitHubGitProvider", cache: GitCache) -> None:
        self.provider = provider
        self._cache = cache

    async def get_remotes(self, repo_path: str) -> list[GitRemote]:
        try:
            context = await self.provider.ensure_repository_context(repo_path)
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get remotes for {repo_path}")
            return []

        repo = context.metadata.repo
        return [
            GitRemote(
                repo_path=repo_path,
                name=REMOTE_NAME,
                domain=GITHUB_DOMAIN,
                path=f"{repo.owner}/{repo.name}",
            )
        ]
