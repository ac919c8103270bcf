import logging

from pipeline_monitor import comment as log_comment
from pipeline_monitor.aws import AWS
from pipeline_monitor.errors import (
    MalformedReference,
    RenderError,
    ResolutionFailure,
    UnsupportedSource,
)
from pipeline_monitor.event import BUILD_STATE, PIPELINE_ACTION, IrrelevantEvent
from pipeline_monitor.provider import GitHub
from pipeline_monitor.revision import (
    RevisionIdentity,
    parse_commit_url,
    parse_pull_request_tag,
    parse_repository_url,
)
from pipeline_monitor.status import NormalizedStatus
from pipeline_monitor.upsert import Coordinator


logger = logging.getLogger(__name__)

# the Source stage is the GitHub trigger itself
SOURCE_STAGE = 'Source'
COMPLETED_PHASE = 'COMPLETED'
GITHUB_SOURCE = 'GITHUB'


def pipeline_console_url(region, pipeline_name, execution_id):
    return (f'https://{region}.console.aws.amazon.com/'
        f'codesuite/codepipeline/pipelines/{pipeline_name}'
        f'/executions/{execution_id}/timeline')


class Router:
    def __init__(self, aws, coordinator, line_limit):
        self.aws = aws
        self.coordinator = coordinator
        self.line_limit = line_limit


    @classmethod
    def create(cls, config, token):
        github = GitHub(token, api_url=config.github_api_url, timeout=config.http_timeout)

        return cls(AWS(timeout=config.http_timeout), Coordinator(github), config.log_line_limit)


    def route(self, event):
        """
        Flow that handles `event`. Raises IrrelevantEvent for anything with
        nothing to report.
        """

        if event.detail_type == PIPELINE_ACTION:
            if event.stage == SOURCE_STAGE:
                raise IrrelevantEvent(f'ignoring the {SOURCE_STAGE} stage of pipeline {event.pipeline}')
            return self.handle_pipeline_event

        if event.detail_type == BUILD_STATE:
            if event.current_phase != COMPLETED_PHASE:
                raise IrrelevantEvent(f'ignoring build notification for phase {event.current_phase}')
            return self.handle_build_event

        raise IrrelevantEvent(f'ignoring {event.detail_type}')


    def handle(self, event):
        self.route(event)(event)


    def resolve_pipeline_revision(self, pipeline_name, execution_id):
        artifact = self.aws.query_pipeline_execution(pipeline_name, execution_id)
        revision = parse_commit_url(artifact.url)

        if revision.commit != artifact.revision_id:
            raise ResolutionFailure(
                    f"revision URL {artifact.url} does not point at revision {artifact.revision_id}")

        return revision


    def handle_pipeline_event(self, event):
        # action execution events give per service or per stack granularity
        stage, action, state = event.stage, event.action, event.state
        details_url = pipeline_console_url(event.region, event.pipeline, event.execution_id)
        logger.info("Processing the %s stage for %s", stage, details_url)

        try:
            revision = self.resolve_pipeline_revision(event.pipeline, event.execution_id)
        except (MalformedReference, ResolutionFailure) as e:
            logger.error("Error getting revision ID for %s: %s", details_url, e)
            return None

        status = NormalizedStatus.for_action(
                revision,
                state,
                action,
                f'{stage} stage executing in {event.region}',
                details_url)

        self.coordinator.upsert_status(status)

        return status


    def handle_build_event(self, event):
        # build state notifications carry inconsistent fields (the PR number
        # only shows up on retries), so only the build id is taken from them
        return self.report_build(event.build_id)


    def report_build(self, build_id):
        try:
            revision, details = self.resolve_build_revision(build_id)
        except (MalformedReference, ResolutionFailure, UnsupportedSource) as e:
            logger.error("Error getting build details for %s: %s", build_id, e)
            return None

        if revision is None:
            logger.info("Build %s was not triggered by a pull request, skipping log comment", build_id)
            return None

        try:
            lines = self.aws.fetch_log_lines(details.log_group, details.log_stream, self.line_limit)
            comment = log_comment.render(
                    details.project_name, lines, details.deep_link, self.line_limit)
        except (ResolutionFailure, RenderError) as e:
            logger.error("Error building log comment for %s: %s", details.deep_link, e)
            return None

        self.coordinator.upsert_comment(comment, revision)

        return comment


    def resolve_build_revision(self, build_id):
        """
        Pull request revision of a build and its details. The revision is
        None for push builds.
        """

        details = self.aws.query_build_details(build_id)

        if details.source_type != GITHUB_SOURCE:
            raise UnsupportedSource(
                    f"this only works with source type {GITHUB_SOURCE}, "
                    f"found source type {details.source_type}")

        repository = parse_repository_url(details.source_location)

        try:
            number = parse_pull_request_tag(details.source_version)
        except MalformedReference:
            return None, details

        revision = RevisionIdentity(
                owner=repository.owner,
                repository=repository.name,
                commit=details.resolved_commit,
                pull_request=number)

        return revision, details
