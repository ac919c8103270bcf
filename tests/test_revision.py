import pytest

from pipeline_monitor.errors import MalformedReference
from pipeline_monitor.revision import (
    Repository,
    RevisionIdentity,
    parse_commit_url,
    parse_pull_request_tag,
    parse_repository_url,
)


def test_parse_repository_url():
    result = parse_repository_url('https://github.com/owner_name/repo-name.git')

    assert result == Repository('owner_name', 'repo-name')
    assert result.owner == 'owner_name'
    assert result.name == 'repo-name'


def test_parse_repository_url_enterprise_path():
    result = parse_repository_url('https://git.example.com/scm/team/service.git?ref=main')

    assert result == Repository('team', 'service')


@pytest.mark.parametrize('url', [
    'https://github.com/owner_name/repo-name',
    'https://github.com/repo-name.git',
    'https://github.com/owner name/repo-name.git',
    'https://github.com/owner_name/repo.name.git',
    'https://github.com/owner_name/repo-name.git/',
    'https://github.com/öwner/repo-name.git',
    '',
    None,
])
def test_parse_repository_url_malformed(url):
    with pytest.raises(MalformedReference):
        parse_repository_url(url)


def test_parse_commit_url():
    commit = '8873423234re34ea1daewerwe93f92d1557a7b9b'

    result = parse_commit_url(f'https://github.com/owner_name/repo-name/commit/{commit}')

    assert result == RevisionIdentity(owner='owner_name', repository='repo-name', commit=commit)
    assert result.pull_request is None


@pytest.mark.parametrize('url', [
    'https://github.com/owner_name/repo-name/commit/',
    'https://github.com/owner_name/repo-name/commits/abc123',
    'https://github.com/repo-name/commit/abc123',
    'https://github.com/owner_name/repo-name/commit/abc-123',
    'https://github.com/owner_name/repo-name.git',
    42,
])
def test_parse_commit_url_malformed(url):
    with pytest.raises(MalformedReference):
        parse_commit_url(url)


@pytest.mark.parametrize('source_version, number', [
    ('pr/39', 39),
    ('pr/1', 1),
    ('refs/pull/pr/1024', 1024),
])
def test_parse_pull_request_tag(source_version, number):
    assert parse_pull_request_tag(source_version) == number


@pytest.mark.parametrize('source_version', [
    'd985a61daddbcd9c05a06d199efc2aeca55e4a19',
    'pr/',
    'pr/39/head',
    'pr/abc',
    'pr/39\n',
    '',
    None,
])
def test_parse_pull_request_tag_malformed(source_version):
    with pytest.raises(MalformedReference):
        parse_pull_request_tag(source_version)


def test_revision_needs_commit_or_pull_request():
    with pytest.raises(MalformedReference):
        RevisionIdentity(owner='owner_name', repository='repo-name')


def test_revision_needs_owner_and_repository():
    with pytest.raises(MalformedReference):
        RevisionIdentity(owner='', repository='repo-name', commit='abc123')


def test_revision_is_immutable():
    revision = RevisionIdentity(owner='owner_name', repository='repo-name', pull_request=39)

    with pytest.raises(AttributeError):
        revision.pull_request = 40
