import logging

from pipeline_monitor.errors import (
    BestEffortCleanupFailed,
    CommentCreateFailed,
    StatusUpdateFailed,
)
from pipeline_monitor.provider import GitHubError


logger = logging.getLogger(__name__)


class Coordinator:
    """
    Create-or-replace of commit statuses and tagged log comments.

    Nothing is retried. Write failures surface to the caller, cleanup
    failures are only logged.
    """

    def __init__(self, github):
        self.github = github


    def upsert_status(self, status):
        # GitHub keeps the latest status per context, so posting again replaces it
        try:
            self.github.create_status(
                    status.owner,
                    status.repository,
                    status.commit,
                    status.state.value,
                    status.label,
                    status.description,
                    status.details_url)
        except GitHubError as e:
            raise StatusUpdateFailed(
                    f"error creating GitHub commit status {status.label!r} on "
                    f"{status.owner}/{status.repository}@{status.commit}: {e}") from e

        logger.info("Set %s status %r on %s/%s@%s",
                status.state.value, status.label, status.owner, status.repository, status.commit)


    def upsert_comment(self, comment, revision):
        if revision.pull_request is None:
            raise ValueError(f"{revision.owner}/{revision.repository} revision has no pull request")

        owner, repo, number = revision.owner, revision.repository, revision.pull_request

        # delete old comments, a prior partial failure may have left several
        for old in self._tagged_comments(comment, revision):
            try:
                self.github.delete_comment(owner, repo, old['id'])
            except GitHubError as e:
                logger.warning("%s", BestEffortCleanupFailed(
                        f"could not delete comment {old['id']} on {owner}/{repo}#{number}: {e}"))
            else:
                logger.info("Deleted comment %s on %s/%s#%s", old['id'], owner, repo, number)

        try:
            self.github.create_comment(owner, repo, number, comment.body)
        except GitHubError as e:
            raise CommentCreateFailed(
                    f"error creating log comment on {owner}/{repo}#{number}: {e}") from e

        logger.info("Created %s comment on %s/%s#%s", comment.tag, owner, repo, number)


    def _tagged_comments(self, comment, revision):
        try:
            comments = self.github.list_comments(
                    revision.owner, revision.repository, revision.pull_request)
        except GitHubError as e:
            logger.warning("%s", BestEffortCleanupFailed(
                    f"could not list comments on {revision.owner}/{revision.repository}"
                    f"#{revision.pull_request}: {e}"))
            return []

        return [c for c in comments if comment.matches(c.get('body'))]
