"""
GitHub-backed git provider.

GitHubGitProvider is the facade the host talks to. It owns the authentication
session, resolves repository paths into a RepositoryContext (API client,
repository metadata, bridge, session) and hands the sub-providers a shared
cache:

- branches / tags / remotes: refs of the repository
- commits: single commits, logs and file logs
- contributors: contributors, with or without per-commit stats
- blame: whole-file, single-line and range blame
- diff: comparisons between refs
- graph: commit graph rows
- revision: reference resolution
- search: commit search

Session and context resolution raise; the sub-providers catch, log and
degrade to empty results.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Literal, TypeVar
from urllib.parse import urlsplit

from remotegit.config import Settings, settings
from remotegit.core.cancellation import CancellationToken
from remotegit.core.exceptions import (
    AuthenticationError,
    AuthenticationErrorReason,
    CancellationError,
    ExtensionNotFoundError,
    OpenVirtualRepositoryError,
    OpenVirtualRepositoryErrorReason,
)
from remotegit.core.storage import InMemoryStorage
from remotegit.git.cache import CacheCategory, GitCache
from remotegit.git.models import GitUser
from remotegit.providers.github.branches import BranchesSubProvider
from remotegit.providers.github.blame import BlameSubProvider
from remotegit.providers.github.commits import CommitsSubProvider
from remotegit.providers.github.contributors import ContributorsSubProvider
from remotegit.providers.github.diff import DiffSubProvider
from remotegit.providers.github.discovery import PendingDiscovery, Scheduler
from remotegit.providers.github.graph import GraphSubProvider
from remotegit.providers.github.remotehub import (
    AuthenticationProvider,
    AuthenticationSession,
    HeadType,
    RemoteHubApi,
    RepositoryMetadata,
    RepositoryRefType,
    Storage,
)
from remotegit.providers.github.remotes import RemotesSubProvider
from remotegit.providers.github.revision import RevisionSubProvider
from remotegit.providers.github.search import SearchSubProvider
from remotegit.providers.github.tags import TagsSubProvider
from remotegit.services.github.read_operations import GitHubReadOperations

logger = logging.getLogger(__name__)

T = TypeVar("T")

PROVIDER_ID = "github"
AUTHENTICATION_SCOPES = ["repo", "read:user", "user:email"]
SUPPORTED_SCHEMES = frozenset({"vscode-vfs", "github", "pr"})
NO_PROVIDER_REGISTERED = "No provider registered"
REMOTEHUB_EXTENSION_ID = "GitHub.remotehub"
REMOTEHUB_EXTENSION_NAME = "GitHub Repositories"

_GITHUB_AUTHORITY_RE = re.compile(r"^github\+?")


@dataclass
class RepositoryContext:
    """Everything needed to talk to GitHub about one repository."""

    api: GitHubReadOperations
    metadata: RepositoryMetadata
    remotehub: RemoteHubApi
    session: AuthenticationSession


async def ensure_provider_loaded(
    uri: str,
    remotehub: RemoteHubApi,
    action: Callable[[str], Awaitable[T]],
) -> T:
    """
    Run a bridge action, loading the workspace once if no provider is registered yet.

    The retry happens at most once; a second failure propagates.
    """
    try:
        return await action(uri)
    except Exception as ex:
        if NO_PROVIDER_REGISTERED.lower() not in str(ex).lower() and remotehub.get_provider(uri) is not None:
            raise
        logger.debug(f"No provider registered for {uri}; loading workspace contents and retrying")
        await remotehub.load_workspace_contents(uri)
        return await action(uri)


class GitHubGitProvider:
    """Git data provider backed by the GitHub API."""

    def __init__(
        self,
        authentication: AuthenticationProvider,
        get_remotehub: Callable[[], Awaitable[RemoteHubApi | None]],
        storage: Storage | None = None,
        on_did_change: Callable[[], None] | None = None,
        on_disabled: Callable[[], None] | None = None,
        scheduler: Scheduler | None = None,
        config: Settings | None = None,
    ) -> None:
        self.settings = config or settings
        self._authentication = authentication
        self._get_remotehub = get_remotehub
        self._storage: Storage = storage if storage is not None else InMemoryStorage()
        self._on_did_change = on_did_change or (lambda: None)
        self._on_disabled = on_disabled or (lambda: None)

        self._cache = GitCache(self.settings.tracked_documents_max)
        self._remotehub: RemoteHubApi | None = None
        self._session: asyncio.Future[AuthenticationSession] | None = None
        self._discovery = PendingDiscovery(
            self.ensure_remotehub,
            self._on_did_change,
            interval=self.settings.pending_discovery_interval,
            scheduler=scheduler,
        )

        self.branches = BranchesSubProvider(self, self._cache)
        self.tags = TagsSubProvider(self, self._cache)
        self.remotes = RemotesSubProvider(self, self._cache)
        self.contributors = ContributorsSubProvider(self, self._cache)
        self.revision = RevisionSubProvider(self, self._cache)
        self.commits = CommitsSubProvider(self, self._cache)
        self.blame = BlameSubProvider(self, self._cache)
        self.diff = DiffSubProvider(self, self._cache)
        self.graph = GraphSubProvider(self, self._cache)
        self.search = SearchSubProvider(self, self._cache)

    @property
    def cache(self) -> GitCache:
        return self._cache

    @property
    def discovery(self) -> PendingDiscovery:
        return self._discovery

    # ─────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────

    def get_paging_limit(self, limit: int | None = None) -> int:
        """Clamp a page size to the API maximum of 100; 0 means the maximum."""
        value = min(100, limit if limit is not None else self.settings.max_list_items)
        return 100 if value == 0 else value

    def get_relative_path(self, path: str, base: str) -> str:
        """Path of `path` inside the repository at `base` (both may be uris)."""
        base_path = urlsplit(base).path.rstrip("/") if "://" in base else base.rstrip("/")
        path_path = urlsplit(path).path if "://" in path else path

        if base_path and (path_path == base_path or path_path.startswith(f"{base_path}/")):
            path_path = path_path[len(base_path):]
        return path_path.lstrip("/")

    def supports(self, feature: str) -> bool:
        return feature == "timeline"

    def is_trackable(self, uri: str) -> bool:
        return urlsplit(uri).scheme in SUPPORTED_SCHEMES

    def handle_request_error(self, ex: Exception, message: str) -> None:
        """Log a failed remote read and drop the session if the token was rejected."""
        if isinstance(ex, CancellationError):
            logger.debug(f"{message}: cancelled")
            return
        if isinstance(ex, AuthenticationError) and ex.reason == AuthenticationErrorReason.UNAUTHORIZED:
            logger.warning(f"{message}: GitHub rejected the session token; dropping session")
            self._session = None
            self._cache.invalidate_all(CacheCategory.CONTEXT)
            return
        logger.error(f"{message}: {ex}")

    # ─────────────────────────────────────────────────────────────────────
    # Session and context
    # ─────────────────────────────────────────────────────────────────────

    @property
    def _skip_key(self) -> str:
        return f"provider:authentication:skip:{PROVIDER_ID}"

    async def ensure_session(self, force: bool = False, silent: bool = False) -> AuthenticationSession:
        """
        Return the memoized session, acquiring one if needed.

        Once the user declines, the decline is remembered and later calls look
        up a session silently instead of prompting again, until `force`.

        Raises:
            AuthenticationError: USER_DID_NOT_CONSENT when declined, reason None
                for any other failure
        """
        if force or self._session is None:
            self._session = asyncio.ensure_future(self._acquire_session(force, silent))
            session_future = self._session
            try:
                return await session_future
            except BaseException:
                if self._session is session_future:
                    self._session = None
                raise
        return await self._session

    async def _acquire_session(self, force: bool, silent: bool) -> AuthenticationSession:
        skip = bool(self._storage.get(self._skip_key, False))

        try:
            if force:
                skip = False
                await self._storage.delete(self._skip_key)
                session = await self._authentication.get_session(
                    PROVIDER_ID, AUTHENTICATION_SCOPES, force_new_session=True
                )
            elif not skip and not silent:
                session = await self._authentication.get_session(
                    PROVIDER_ID, AUTHENTICATION_SCOPES, create_if_needed=True
                )
            else:
                session = await self._authentication.get_session(PROVIDER_ID, AUTHENTICATION_SCOPES)

            if session is not None:
                logger.info(f"Acquired {PROVIDER_ID} session for {session.account.label}")
                return session

            raise AuthenticationError(PROVIDER_ID, AuthenticationErrorReason.USER_DID_NOT_CONSENT)
        except AuthenticationError as ex:
            if ex.reason != AuthenticationErrorReason.USER_DID_NOT_CONSENT:
                raise
            return await self._on_consent_declined(force, silent, skip, ex)
        except Exception as ex:
            if "User did not consent" in str(ex):
                return await self._on_consent_declined(force, silent, skip, ex)
            logger.exception(f"Unable to acquire {PROVIDER_ID} session")
            raise AuthenticationError(PROVIDER_ID, None, ex) from ex

    async def _on_consent_declined(
        self,
        force: bool,
        silent: bool,
        skip: bool,
        ex: Exception,
    ) -> AuthenticationSession:
        if not silent:
            await self._storage.store(self._skip_key, True)
            if not skip:
                if not force:
                    logger.info(f"{PROVIDER_ID} authentication declined; disabling until reconnected")
                    self._on_disabled()
                # Skip flag is now stored, so this lookup is silent
                return await self._acquire_session(False, silent)

        raise AuthenticationError(
            PROVIDER_ID, AuthenticationErrorReason.USER_DID_NOT_CONSENT, ex
        ) from ex

    async def ensure_remotehub(self) -> RemoteHubApi:
        """
        Return the workspace provider bridge, loading it on first use.

        Raises:
            ExtensionNotFoundError: When the bridge is not available
        """
        if self._remotehub is None:
            remotehub = await self._get_remotehub()
            if remotehub is None:
                raise ExtensionNotFoundError(REMOTEHUB_EXTENSION_ID, REMOTEHUB_EXTENSION_NAME)
            self._remotehub = remotehub
        return self._remotehub

    async def ensure_repository_context(self, repo_path: str, open: bool = False) -> RepositoryContext:
        """
        Resolve a repository path into a RepositoryContext.

        Concurrent callers share one resolution per repository path; a failed
        resolution is not cached.

        Raises:
            OpenVirtualRepositoryError: When the path is not a GitHub repository,
                the bridge is unavailable or no session can be obtained
        """
        future = self._cache.contexts.get_or_create(
            repo_path, lambda: self._resolve_repository_context(repo_path)
        )
        context: RepositoryContext = await future
        return context

    async def _resolve_repository_context(self, repo_path: str) -> RepositoryContext:
        parts = urlsplit(repo_path)
        if parts.scheme not in SUPPORTED_SCHEMES or not _GITHUB_AUTHORITY_RE.match(parts.netloc):
            raise OpenVirtualRepositoryError(repo_path, OpenVirtualRepositoryErrorReason.NOT_A_GITHUB_REPOSITORY)

        try:
            remotehub = await self.ensure_remotehub()
        except Exception as ex:
            raise OpenVirtualRepositoryError(
                repo_path, OpenVirtualRepositoryErrorReason.REMOTEHUB_API_NOT_FOUND, ex
            ) from ex

        metadata = await ensure_provider_loaded(repo_path, remotehub, remotehub.get_metadata)
        if metadata is None or metadata.provider.id != PROVIDER_ID:
            raise OpenVirtualRepositoryError(repo_path, OpenVirtualRepositoryErrorReason.NOT_A_GITHUB_REPOSITORY)

        # A pull request workspace may be on a branch of the author's fork
        if metadata.ref_type == RepositoryRefType.PULL_REQUEST:
            revision = await metadata.get_revision()
            if revision.type == HeadType.REMOTE_BRANCH:
                remote = revision.name.split(":", 1)[0]
                if remote != metadata.repo.owner:
                    metadata.repo.owner = remote

        try:
            session = await self.ensure_session()
        except AuthenticationError as ex:
            reason = (
                OpenVirtualRepositoryErrorReason.GITHUB_AUTHENTICATION_DENIED
                if ex.reason == AuthenticationErrorReason.USER_DID_NOT_CONSENT
                else OpenVirtualRepositoryErrorReason.GITHUB_AUTHENTICATION_NOT_FOUND
            )
            raise OpenVirtualRepositoryError(repo_path, reason, ex) from ex

        logger.debug(f"Resolved repository context for {repo_path}: {metadata.repo.owner}/{metadata.repo.name}")
        return RepositoryContext(
            api=GitHubReadOperations(
                session.access_token,
                base_url=self.settings.github_api_url,
                graphql_url=self.settings.github_graphql_url,
                api_version=self.settings.github_api_version,
            ),
            metadata=metadata,
            remotehub=remotehub,
            session=session,
        )

    # ─────────────────────────────────────────────────────────────────────
    # Discovery
    # ─────────────────────────────────────────────────────────────────────

    async def discover_repositories(self, uri: str) -> list[str]:
        """
        Return the workspace uri for a GitHub repository uri, if it can be opened.

        When the bridge has no provider registered for the uri yet, the uri is
        queued for polling and `on_did_change` fires once it becomes available.
        """
        if not self.is_trackable(uri):
            return []

        try:
            context = await self.ensure_repository_context(uri, open=True)
            workspace_uri = context.remotehub.get_virtual_workspace_uri(uri)
            return [workspace_uri] if workspace_uri else []
        except Exception as ex:
            if NO_PROVIDER_REGISTERED in str(ex):
                logger.warning(f"No GitHub provider registered for {uri} (yet); queuing pending discovery")
                self._discovery.add(uri)
            else:
                logger.error(f"Unable to discover repository for {uri}: {ex}")
            return []

    # ─────────────────────────────────────────────────────────────────────
    # Repository information
    # ─────────────────────────────────────────────────────────────────────

    async def get_current_user(self, repo_path: str) -> GitUser | None:
        """
        Return the authenticated viewer.

        Concurrent callers share one lookup. A missing viewer is remembered; a
        failed lookup is not cached, so the next call asks again.
        """
        try:
            future = self._cache.current_user.get_or_create(
                repo_path, lambda: self._load_current_user(repo_path)
            )
            return await future
        except Exception as ex:
            self.handle_request_error(ex, f"Unable to get current user for {repo_path}")
            return None

    async def _load_current_user(self, repo_path: str) -> GitUser | None:
        context = await self.ensure_repository_context(repo_path)
        viewer = await context.api.get_current_user(context.metadata.repo.owner, context.metadata.repo.name)
        if viewer is None:
            return None
        return GitUser(name=viewer.name, email=viewer.email, username=viewer.login, id=viewer.id)

    async def get_default_branch_name(self, repo_path: str) -> str | None:
        try:
            context = await self.ensure_repository_context(repo_path)
            return await context.api.get_default_branch_name(
                context.metadata.repo.owner, context.metadata.repo.name
            )
        except Exception as ex:
            self.handle_request_error(ex, f"Unable to get default branch for {repo_path}")
            return None

    async def visibility(
        self,
        repo_path: str,
        cancellation: CancellationToken | None = None,
    ) -> Literal["public", "private"] | None:
        try:
            context = await self.ensure_repository_context(repo_path)
            return await context.api.get_repository_visibility(
                context.metadata.repo.owner, context.metadata.repo.name, cancellation
            )
        except Exception as ex:
            self.handle_request_error(ex, f"Unable to get visibility for {repo_path}")
            return None

    # ─────────────────────────────────────────────────────────────────────
    # Signals from the host
    # ─────────────────────────────────────────────────────────────────────

    async def on_sessions_changed(self, provider_id: str) -> None:
        """Sessions changed in the authentication provider; silently re-acquire."""
        if provider_id != PROVIDER_ID:
            return

        logger.info(f"{PROVIDER_ID} sessions changed; re-acquiring silently")
        self._session = None
        self._cache.invalidate_all(CacheCategory.CONTEXT)
        try:
            await self.ensure_session(False, True)
        except AuthenticationError as ex:
            logger.info(f"No {PROVIDER_ID} session after sessions changed: {ex}")

    async def on_reauthenticated(self) -> AuthenticationSession:
        """Force a new session, prompting the user."""
        self._cache.invalidate_all(CacheCategory.CONTEXT)
        return await self.ensure_session(force=True)

    async def reconnect(self) -> AuthenticationSession:
        """Explicitly reconnect, clearing a remembered decline."""
        return await self.on_reauthenticated()

    def on_cache_reset(
        self,
        repo_path: str | None = None,
        types: list[CacheCategory | str] | None = None,
    ) -> None:
        self._cache.on_cache_reset(repo_path, types)

    def on_repository_changed(self, repo_path: str) -> None:
        self._cache.on_repository_changed(repo_path)

    def on_repository_closed(self, repo_path: str) -> None:
        self._cache.invalidate(repo_path)
        self._cache.documents.reset(repo_path)

    def dispose(self) -> None:
        self._discovery.dispose()
        self._cache.invalidate_all()
