import pytest
import requests

from pipeline_monitor import provider
from pipeline_monitor.provider import GitHub, GitHubError


HEADERS = {
    'Authorization': 'token token1',
    'Accept': 'application/vnd.github+json',
}


class MockResponse:
    def __init__(self, status_code, data=None, links=None):
        self.status_code = status_code
        self.data = data
        self.links = links or {}

    def json(self):
        return self.data


@pytest.fixture
def github():
    return GitHub('token1', api_url='https://github.example.com/api/v3/', timeout=5)


def test_create_status(mocker, github):
    mocker.patch('requests.post', return_value=MockResponse(201))

    github.create_status('leg100', 'webapp', 'd985a61d', 'success', 'deploy for prod',
            'Deploy stage executing in us-west-2', 'https://example.com/timeline')

    provider.requests.post.assert_called_once_with(
        'https://github.example.com/api/v3/repos/leg100/webapp/statuses/d985a61d',
        headers=HEADERS,
        timeout=5,
        json={
            'state': 'success',
            'target_url': 'https://example.com/timeline',
            'description': 'Deploy stage executing in us-west-2',
            'context': 'deploy for prod',
        })


def test_create_status_forbidden(mocker, github):
    mocker.patch('requests.post', return_value=MockResponse(403))

    with pytest.raises(GitHubError, match="HTTP 403 response from POST"):
        github.create_status('leg100', 'webapp', 'd985a61d', 'success', 'label', 'desc', 'url')


def test_connection_error(mocker, github):
    mocker.patch('requests.post', side_effect=requests.ConnectionError('connection refused'))

    with pytest.raises(GitHubError, match="connection refused"):
        github.create_comment('leg100', 'webapp', 39, 'body')


def test_list_comments_follows_pages(mocker, github):
    next_url = 'https://github.example.com/api/v3/repos/leg100/webapp/issues/39/comments?page=2'
    mocker.patch('requests.get', side_effect=[
        MockResponse(200, [
            {'id': 1, 'body': 'first', 'updated_at': '2020-01-01T10:00:00Z'},
        ], links={'next': {'url': next_url}}),
        MockResponse(200, [
            {'id': 2, 'body': 'second', 'updated_at': '2020-01-03T10:00:00Z'},
            {'id': 3, 'body': 'third', 'updated_at': '2020-01-02T10:00:00Z'},
        ]),
    ])

    comments = github.list_comments('leg100', 'webapp', 39)

    assert [c['id'] for c in comments] == [2, 3, 1]
    first, second = provider.requests.get.call_args_list
    assert first == mocker.call(
        'https://github.example.com/api/v3/repos/leg100/webapp/issues/39/comments',
        headers=HEADERS,
        timeout=5,
        params={'sort': 'updated', 'direction': 'desc', 'per_page': 100})
    assert second == mocker.call(next_url, headers=HEADERS, timeout=5, params=None)


def test_delete_comment(mocker, github):
    mocker.patch('requests.delete', return_value=MockResponse(204))

    github.delete_comment('leg100', 'webapp', 8)

    provider.requests.delete.assert_called_once_with(
        'https://github.example.com/api/v3/repos/leg100/webapp/issues/comments/8',
        headers=HEADERS,
        timeout=5)


def test_delete_comment_not_found(mocker, github):
    mocker.patch('requests.delete', return_value=MockResponse(404))

    with pytest.raises(GitHubError, match="404"):
        github.delete_comment('leg100', 'webapp', 8)


def test_create_comment(mocker, github):
    mocker.patch('requests.post', return_value=MockResponse(201))

    github.create_comment('leg100', 'webapp', 39, 'build log')

    provider.requests.post.assert_called_once_with(
        'https://github.example.com/api/v3/repos/leg100/webapp/issues/39/comments',
        headers=HEADERS,
        timeout=5,
        json={'body': 'build log'})
