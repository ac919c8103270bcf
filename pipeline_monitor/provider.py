from datetime import datetime

import requests


class GitHubError(RuntimeError):
    pass


class GitHub:
    """Commit statuses and pull request comments through the GitHub REST API."""

    def __init__(self, token, api_url='https://api.github.com', timeout=10):
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.headers = {
            'Authorization': f'token {token}',
            'Accept': 'application/vnd.github+json',
            }


    def _request(self, method, url, expected, **kwargs):
        try:
            resp = getattr(requests, method)(
                    url,
                    headers=self.headers,
                    timeout=self.timeout,
                    **kwargs)
        except requests.RequestException as e:
            raise GitHubError(f"{method.upper()} {url} failed: {e}") from e

        if resp.status_code not in expected:
            raise GitHubError(f"HTTP {resp.status_code} response from {method.upper()} {url}")

        return resp


    def repo_url(self, owner, repo):
        return f'{self.api_url}/repos/{owner}/{repo}'


    def create_status(self, owner, repo, commit, state, label, description, url):
        self._request(
                'post',
                f'{self.repo_url(owner, repo)}/statuses/{commit}',
                [200, 201],
                json={
                    'state': state,
                    'target_url': url,
                    'description': description,
                    'context': label,
                    })


    def list_comments(self, owner, repo, number):
        """Comments of a pull request, most recently updated first."""

        url = f'{self.repo_url(owner, repo)}/issues/{number}/comments'
        params = {'sort': 'updated', 'direction': 'desc', 'per_page': 100}
        comments = []

        while url:
            resp = self._request('get', url, [200], params=params)
            comments.extend(resp.json())

            # the next link already carries the query string
            url = resp.links.get('next', {}).get('url')
            params = None

        # the issue comments endpoint does not honour sort for a single issue
        return sorted(comments, key=_updated_at, reverse=True)


    def delete_comment(self, owner, repo, comment_id):
        self._request(
                'delete',
                f'{self.repo_url(owner, repo)}/issues/comments/{comment_id}',
                [204])


    def create_comment(self, owner, repo, number, body):
        self._request(
                'post',
                f'{self.repo_url(owner, repo)}/issues/{number}/comments',
                [201],
                json={'body': body})


def _updated_at(comment):
    stamp = comment.get('updated_at') or comment.get('created_at')
    if not stamp:
        return datetime.min

    return datetime.strptime(stamp, '%Y-%m-%dT%H:%M:%SZ')
