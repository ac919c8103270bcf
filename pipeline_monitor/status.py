import enum
from dataclasses import dataclass


class State(enum.Enum):
    """GitHub commit status states."""

    PENDING = 'pending'
    SUCCESS = 'success'
    FAILURE = 'failure'
    ERROR = 'error'


# CodePipeline ActionExecution states
# https://docs.aws.amazon.com/codepipeline/latest/APIReference/API_ActionExecution.html
states = {
    'STARTED'   : State.PENDING,
    'SUCCEEDED' : State.SUCCESS,
    'FAILED'    : State.FAILURE,
    }


def translate(provider_state):
    if not isinstance(provider_state, str):
        return State.ERROR

    return states.get(provider_state, State.ERROR)


def label_for(action):
    # "deploy-prod" reads better as "deploy for prod" in the GitHub UI
    prefix, separator, suffix = action.partition('-')
    if not separator:
        return action

    return f'{prefix} for {suffix}'


@dataclass(frozen=True)
class NormalizedStatus:
    owner: str
    repository: str
    commit: str
    state: State
    label: str
    description: str
    details_url: str

    @classmethod
    def for_action(cls, revision, provider_state, action, description, details_url):
        return cls(
            owner=revision.owner,
            repository=revision.repository,
            commit=revision.commit,
            state=translate(provider_state),
            label=label_for(action),
            description=description,
            details_url=details_url)
