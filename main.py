import functools
import logging

from pipeline_monitor import credentials
from pipeline_monitor.config import Config
from pipeline_monitor.event import Event, IrrelevantEvent
from pipeline_monitor.router import Router


logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=None)
def get_router():
    # load the GitHub token once per Lambda container, not on every invocation
    config = Config.from_env()
    logging.getLogger().setLevel(config.log_level)

    token = credentials.load_github_token(config.token_secret_name, config.http_timeout)

    return Router.create(config, token)


def build_status(event, context):
    """
    Lambda function triggered by EventBridge.

    Sets GitHub commit statuses from CodePipeline action executions and
    posts CodeBuild logs of pull request builds as PR comments.
    """

    router = get_router()

    try:
        event = Event(event)
        router.handle(event)
    except IrrelevantEvent as e:
        logger.info("Ignoring event: %s", e)

    return "OK"
