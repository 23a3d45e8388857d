"""GitLab client for project and merge request operations."""

from typing import Any

import gitlab
from gitlab.exceptions import GitlabError

from hoist.core.exceptions import ScmError
from hoist.utils.logging import get_logger

logger = get_logger(__name__)


class GitLabClient:
    """GitLab API client wrapper."""

    def __init__(self, url: str, token: str):
        """Initialize GitLab client.

        Args:
            url: GitLab instance URL
            token: Private access token
        """
        self.url = url
        self.gl = gitlab.Gitlab(url, private_token=token)

        try:
            self.gl.auth()
            logger.debug("gitlab_client_initialized", url=url)
        except GitlabError as e:
            logger.error("gitlab_auth_failed", url=url, error=str(e))
            raise ScmError(f"Failed to authenticate with GitLab: {e}") from e

    def get_project(self, project_id: str | int) -> Any:
        """Get a GitLab project.

        Args:
            project_id: Project ID or path (e.g., "group/project")

        Returns:
            Project object

        Raises:
            ScmError: If project cannot be retrieved
        """
        try:
            logger.debug("getting_project", project_id=project_id)
            project = self.gl.projects.get(project_id)
            logger.info("project_retrieved", project_id=project_id)
            return project

        except GitlabError as e:
            logger.error("get_project_failed", project_id=project_id, error=str(e))
            raise ScmError(f"Failed to get project {project_id}: {e}") from e

    def list_merge_requests(
        self,
        project_id: str | int,
        state: str = "opened",
        labels: list[str] | None = None,
        target_branch: str | None = None,
    ) -> list[Any]:
        """List merge requests for a project.

        Args:
            project_id: Project ID or path
            state: MR state to filter (opened, closed, merged, all)
            labels: Only MRs carrying all of these labels
            target_branch: Optional target branch filter

        Returns:
            List of MR objects

        Raises:
            ScmError: If listing fails
        """
        try:
            logger.debug(
                "listing_merge_requests",
                project_id=project_id,
                state=state,
                labels=labels,
            )

            project = self.get_project(project_id)

            filters: dict[str, Any] = {"state": state, "get_all": True}
            if labels:
                filters["labels"] = labels
            if target_branch:
                filters["target_branch"] = target_branch

            mrs = project.mergerequests.list(**filters)

            logger.info("merge_requests_listed", project_id=project_id, count=len(mrs))
            return mrs

        except GitlabError as e:
            logger.error(
                "list_merge_requests_failed",
                project_id=project_id,
                error=str(e),
            )
            raise ScmError(f"Failed to list MRs for {project_id}: {e}") from e

    def create_merge_request(
        self,
        project_id: str | int,
        source_branch: str,
        target_branch: str,
        title: str,
        description: str,
        labels: list[str] | None = None,
    ) -> Any:
        """Create a merge request.

        Args:
            project_id: Project ID or path
            source_branch: Source branch name
            target_branch: Target branch name
            title: MR title
            description: MR description
            labels: Labels to attach

        Returns:
            MR object

        Raises:
            ScmError: If MR creation fails
        """
        try:
            logger.debug(
                "creating_merge_request",
                project_id=project_id,
                source_branch=source_branch,
                target_branch=target_branch,
            )

            project = self.get_project(project_id)

            mr_data: dict[str, Any] = {
                "source_branch": source_branch,
                "target_branch": target_branch,
                "title": title,
                "description": description,
            }
            if labels:
                mr_data["labels"] = ",".join(labels)

            mr = project.mergerequests.create(mr_data)

            logger.info(
                "merge_request_created",
                mr_iid=mr.iid,
                mr_url=mr.web_url,
            )
            return mr

        except GitlabError as e:
            logger.error(
                "create_merge_request_failed",
                source_branch=source_branch,
                error=str(e),
            )
            raise ScmError(f"Failed to create MR from {source_branch}: {e}") from e

    def update_merge_request(
        self, project_id: str | int, mr_iid: int, title: str, description: str
    ) -> Any:
        """Update title and description of a merge request.

        Args:
            project_id: Project ID or path
            mr_iid: MR internal ID
            title: New title
            description: New description

        Returns:
            MR object

        Raises:
            ScmError: If the update fails
        """
        try:
            logger.debug("updating_merge_request", project_id=project_id, mr_iid=mr_iid)

            project = self.get_project(project_id)
            mr = project.mergerequests.get(mr_iid)
            mr.title = title
            mr.description = description
            mr.save()

            logger.info("merge_request_updated", mr_iid=mr_iid, mr_url=mr.web_url)
            return mr

        except GitlabError as e:
            logger.error("update_merge_request_failed", mr_iid=mr_iid, error=str(e))
            raise ScmError(f"Failed to update MR {mr_iid}: {e}") from e
