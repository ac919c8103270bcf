from collections import namedtuple
from dataclasses import dataclass
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from pipeline_monitor.errors import ResolutionFailure


def client_config(timeout=10):
    # one attempt per call, failures surface to the event instead of retrying
    return Config(
        retries={'mode': 'standard', 'total_max_attempts': 1},
        connect_timeout=timeout,
        read_timeout=timeout)


ArtifactRevision = namedtuple('ArtifactRevision', ['url', 'revision_id'])


@dataclass(frozen=True)
class BuildDetails:
    build_id: str
    project_name: str
    source_type: str
    source_location: str
    source_version: Optional[str]
    resolved_commit: Optional[str]
    log_group: str
    log_stream: str
    deep_link: str


class AWS:
    """
    Read-only queries against CodePipeline, CodeBuild and CloudWatch Logs.

    Event payloads only point at an execution or a build; the details used for
    routing always come from these APIs.
    """

    def __init__(self, codepipeline=None, codebuild=None, logs=None, timeout=10):
        config = client_config(timeout)
        self.codepipeline = codepipeline or boto3.client('codepipeline', config=config)
        self.codebuild = codebuild or boto3.client('codebuild', config=config)
        self.logs = logs or boto3.client('logs', config=config)


    def query_pipeline_execution(self, pipeline_name, execution_id):
        try:
            result = self.codepipeline.get_pipeline_execution(
                    pipelineName=pipeline_name,
                    pipelineExecutionId=execution_id)
            artifacts = result['pipelineExecution'].get('artifactRevisions', [])
        except (BotoCoreError, ClientError, KeyError) as e:
            raise ResolutionFailure(
                    f"unable to retrieve execution {execution_id} of pipeline {pipeline_name}: {e}") from e

        if len(artifacts) != 1:
            raise ResolutionFailure(
                    f"expected exactly one artifact revision for execution {execution_id}, "
                    f"got {len(artifacts)}")

        artifact = artifacts[0]
        try:
            return ArtifactRevision(artifact['revisionUrl'], artifact['revisionId'])
        except KeyError as e:
            raise ResolutionFailure(f"artifact revision of execution {execution_id} has no {e}") from e


    def query_build_details(self, build_id):
        try:
            builds = self.codebuild.batch_get_builds(ids=[build_id])['builds']
        except (BotoCoreError, ClientError, KeyError) as e:
            raise ResolutionFailure(f"unable to retrieve build {build_id}: {e}") from e

        if len(builds) != 1:
            raise ResolutionFailure(f"unexpected {len(builds)} results for build-id: {build_id}")

        build = builds[0]
        try:
            logs = build['logs']
            return BuildDetails(
                build_id=build_id,
                project_name=build['projectName'],
                source_type=build['source']['type'],
                source_location=build['source'].get('location'),
                source_version=build.get('sourceVersion'),
                resolved_commit=build.get('resolvedSourceVersion'),
                log_group=logs['groupName'],
                log_stream=logs['streamName'],
                deep_link=logs['deepLink'])
        except KeyError as e:
            raise ResolutionFailure(f"build {build_id} has no {e}") from e


    def fetch_log_lines(self, log_group, log_stream, limit):
        """First `limit` messages of a log stream, oldest first."""

        try:
            resp = self.logs.get_log_events(
                    logGroupName=log_group,
                    logStreamName=log_stream,
                    limit=limit,
                    startFromHead=True)
        except (BotoCoreError, ClientError) as e:
            raise ResolutionFailure(f"error retrieving log stream {log_group}/{log_stream}: {e}") from e

        return [event['message'] for event in resp.get('events', [])]
