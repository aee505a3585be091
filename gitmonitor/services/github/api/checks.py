"""
CI/deploy status of a repository's current commit.

Checks API first (GitHub Actions and most modern CI), then the legacy
combined commit status API (external deploy services).
"""

import logging
from typing import Any, Dict, List, Optional, Set

import httpx

from gitmonitor.common.config.config import (
    DEPLOY_ERROR_MAX_CHARS,
    READ_PROBE_TIMEOUT_SECONDS,
)
from gitmonitor.common.utils.text import truncate
from gitmonitor.models.types import DeployStatus, ErrorKind
from gitmonitor.services.git.process_runner import ProcessRunner
from gitmonitor.services.git.status_checker import read_remote_url
from gitmonitor.services.github.api.client import (
    TRANSPORT_FAILURE_STATUS,
    ApiResponse,
    GitHubAPIClient,
)
from gitmonitor.services.github.models.types import (
    CheckRunConclusion,
    CheckRunStatus,
    CommitState,
)
from gitmonitor.services.github.repository.url_parser import (
    DEFAULT_HOST,
    RepositoryURLInfo,
    try_parse_repository_url,
)

logger = logging.getLogger(__name__)

FAILED_CONCLUSIONS = {
    CheckRunConclusion.FAILURE.value,
    CheckRunConclusion.CANCELLED.value,
    CheckRunConclusion.TIMED_OUT.value,
}


def summarize_check_runs(runs: List[Dict[str, Any]]) -> DeployStatus:
    """Classify a non-empty list of check runs."""
    in_progress = [r for r in runs if r.get("status") != CheckRunStatus.COMPLETED.value]
    if in_progress:
        return DeployStatus.pending(f"{len(in_progress)} in progress")

    failed = [r for r in runs if r.get("conclusion") in FAILED_CONCLUSIONS]
    if failed:
        return DeployStatus.failure(", ".join(str(r.get("name", "?")) for r in failed))

    return DeployStatus.success()


def summarize_combined_status(data: Dict[str, Any]) -> Optional[DeployStatus]:
    """Classify a combined commit status; None when it reports nothing."""
    if not data.get("total_count"):
        return None

    state = data.get("state")
    if state == CommitState.SUCCESS.value:
        return DeployStatus.success()
    if state in (CommitState.FAILURE.value, CommitState.ERROR.value):
        failed = [s for s in data.get("statuses") or [] if s.get("state") != CommitState.SUCCESS.value]
        return DeployStatus.failure(", ".join(str(s.get("context", "?")) for s in failed))
    if state == CommitState.PENDING.value:
        return DeployStatus.pending()
    return None


def _access_error(status_code: int) -> DeployStatus:
    if status_code == TRANSPORT_FAILURE_STATUS:
        return DeployStatus.error("GitHub API unreachable", ErrorKind.NETWORK_FAILURE)
    kind = (
        ErrorKind.AUTHORIZATION_FAILURE
        if status_code in (401, 403, 404)
        else ErrorKind.UNCLASSIFIED
    )
    return DeployStatus.error(
        f"credential lacks repository access (HTTP {status_code})", kind
    )


def github_hosts(api_base_url: str) -> Set[str]:
    """Remote hosts served by the API at ``api_base_url``."""
    api_host = (httpx.URL(api_base_url).host or "").lower()
    if api_host in ("api.github.com", DEFAULT_HOST):
        return {DEFAULT_HOST, "ssh.github.com", "www.github.com"}
    # GitHub Enterprise: the API lives under /api/v3 on the instance host
    return {api_host}


class DeployStatusResolver:
    """Resolves the DeployStatus of a local repository's HEAD commit."""

    def __init__(
        self,
        github_token: str = "",
        runner: Optional[ProcessRunner] = None,
        client: Optional[GitHubAPIClient] = None,
    ):
        self.github_token = github_token
        self.runner = runner or ProcessRunner()
        self.client = client or (GitHubAPIClient(token=github_token) if github_token else None)

    async def resolve(self, local_path: str) -> DeployStatus:
        """Resolve deploy status. Never raises.

        Args:
            local_path: Repository working directory

        Returns:
            DeployStatus for the current commit
        """
        if not self.github_token or self.client is None:
            return DeployStatus.no_token()

        try:
            return await self._resolve(local_path)
        except Exception as e:
            logger.error(f"Deploy status check failed for {local_path}: {e}")
            return DeployStatus.error(
                truncate(str(e) or type(e).__name__, DEPLOY_ERROR_MAX_CHARS),
                ErrorKind.UNCLASSIFIED,
            )

    async def _resolve(self, local_path: str) -> DeployStatus:
        sha_result = await self.runner.run_git(
            ["rev-parse", "HEAD"], cwd=local_path, timeout=READ_PROBE_TIMEOUT_SECONDS
        )
        if not sha_result.ok:
            return DeployStatus.error(
                truncate(sha_result.message or "could not read current commit", DEPLOY_ERROR_MAX_CHARS),
                sha_result.error_kind or ErrorKind.TOOL_FAILURE,
            )
        sha = sha_result.stdout.strip()

        remote_url = await read_remote_url(self.runner, local_path)
        if not remote_url:
            return DeployStatus.error("no remote configured", ErrorKind.NOT_FOUND)

        url_info = self._github_repository(remote_url)
        if url_info is None:
            return DeployStatus.error("not a GitHub repository", ErrorKind.NOT_FOUND)

        commit_path = f"repos/{url_info.owner}/{url_info.repo_name}/commits/{sha}"

        check_res = await self.client.get(f"{commit_path}/check-runs", params={"per_page": 100})
        runs = check_res.data.get("check_runs") if check_res.ok else None
        if isinstance(runs, list) and runs:
            return summarize_check_runs(runs)

        status_res = await self.client.get(f"{commit_path}/status")
        if status_res.ok:
            combined = summarize_combined_status(status_res.data)
            if combined is not None:
                return combined

        failing = self._first_failure(check_res, status_res)
        if failing is not None:
            logger.warning(
                f"GitHub API access failed for {url_info.full_name} (HTTP {failing.status_code})"
            )
            return _access_error(failing.status_code)

        return DeployStatus.none()

    def _github_repository(self, remote_url: str) -> Optional[RepositoryURLInfo]:
        url_info = try_parse_repository_url(remote_url, allow_short_form=False)
        if url_info is None:
            return None
        if url_info.host.lower() not in github_hosts(self.client.base_url):
            logger.info(f"Remote host {url_info.host} is not served by {self.client.base_url}")
            return None
        return url_info

    @staticmethod
    def _first_failure(*responses: ApiResponse) -> Optional[ApiResponse]:
        for response in responses:
            if not response.ok:
                return response
        return None
