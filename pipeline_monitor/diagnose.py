import argparse
import logging
import os
import sys

from pipeline_monitor.aws import AWS
from pipeline_monitor.config import MAX_LOG_LINES
from pipeline_monitor.errors import CommentCreateFailed
from pipeline_monitor.provider import GitHub
from pipeline_monitor.router import Router
from pipeline_monitor.upsert import Coordinator


def parse_args(argv):
    parser = argparse.ArgumentParser(
            description='Post the log of a CodeBuild build to its pull request.')
    parser.add_argument('build_id', help='CodeBuild build id, e.g. project:uuid')
    parser.add_argument('--lines', type=int, default=MAX_LOG_LINES,
            help='number of log lines to include')
    parser.add_argument('--github-api-url', default='https://api.github.com')

    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    token = os.environ.get('GITHUB_TOKEN')
    if not token:
        print('GITHUB_TOKEN must be set', file=sys.stderr)
        return 1

    router = Router(AWS(), Coordinator(GitHub(token, api_url=args.github_api_url)), args.lines)

    try:
        comment = router.report_build(args.build_id)
    except CommentCreateFailed as e:
        print(f'Error adding comment: {e}', file=sys.stderr)
        return 1

    if comment is None:
        print(f'No log comment posted for {args.build_id}', file=sys.stderr)
        return 1

    print(f'Posted {comment.tag} comment')
    return 0


if __name__ == '__main__':
    sys.exit(main())
