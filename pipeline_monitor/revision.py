import re
from collections import namedtuple
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from pipeline_monitor.errors import MalformedReference


# https://github.com/owner/repo.git
REPOSITORY_PATH = re.compile(r'/(?P<owner>[\w-]+)/(?P<repo>[\w-]+)\.git\Z', re.ASCII)

# https://github.com/owner/repo/commit/8873423234re34ea1daewerwe93f92d1557a7b9b
COMMIT_PATH = re.compile(
        r'/(?P<owner>[\w-]+)/(?P<repo>[\w-]+)/commit/(?P<commit>\w+)\Z', re.ASCII)

# CodeBuild SourceVersion of a pull request build, e.g. "pr/39". Push builds
# only carry a git revision hash.
PULL_REQUEST_TAG = re.compile(r'pr/(?P<number>\d+)\Z', re.ASCII)


Repository = namedtuple('Repository', ['owner', 'name'])


@dataclass(frozen=True)
class RevisionIdentity:
    owner: str
    repository: str
    commit: Optional[str] = None
    pull_request: Optional[int] = None

    def __post_init__(self):
        if not self.owner or not self.repository:
            raise MalformedReference('revision needs an owner and a repository')
        if self.commit is None and self.pull_request is None:
            raise MalformedReference(
                    f'revision of {self.owner}/{self.repository} needs a commit '
                    'or a pull request number')


def _match_path(pattern, url):
    if not isinstance(url, str):
        raise MalformedReference(f'expected a URL string, got {url!r}')

    try:
        path = urlparse(url).path
    except ValueError as e:
        raise MalformedReference(f'failed to parse URL {url}: {e}') from e

    match = pattern.search(path)
    if match is None:
        raise MalformedReference(
                f'failed to parse URL {url}, path {path!r} does not match {pattern.pattern}')

    return match


def parse_repository_url(url):
    match = _match_path(REPOSITORY_PATH, url)

    return Repository(match['owner'], match['repo'])


def parse_commit_url(url):
    match = _match_path(COMMIT_PATH, url)

    return RevisionIdentity(
            owner=match['owner'],
            repository=match['repo'],
            commit=match['commit'])


def parse_pull_request_tag(source_version):
    """
    Pull request number of a CodeBuild source version such as "pr/39".

    Only builds triggered by PULL_REQUEST_CREATED, PULL_REQUEST_UPDATED or
    PULL_REQUEST_REOPENED carry the tag, so MalformedReference is the normal
    outcome for push builds.
    """

    if not isinstance(source_version, str):
        raise MalformedReference(f'expected a source version string, got {source_version!r}')

    match = PULL_REQUEST_TAG.search(source_version)
    if match is None:
        raise MalformedReference(f'source version {source_version!r} is not a pull request tag')

    return int(match['number'])
