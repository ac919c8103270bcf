import json


PIPELINE_ACTION = 'CodePipeline Action Execution State Change'
BUILD_STATE = 'CodeBuild Build State Change'


class IrrelevantEvent(Exception):
    pass


class Event:
    """
    EventBridge event, see
    https://docs.aws.amazon.com/AmazonCloudWatch/latest/events/EventTypes.html
    """

    def __init__(self, event):
        if not isinstance(event, dict):
            raise IrrelevantEvent(f"expected an event object, got {type(event).__name__}")
        self.data = event

        detail = event.get('detail', {})
        if isinstance(detail, (str, bytes)):
            try:
                detail = json.loads(detail)
            except ValueError:
                raise IrrelevantEvent('event detail is not valid JSON')
        if not isinstance(detail, dict):
            raise IrrelevantEvent('event detail is not an object')
        self.detail = detail


    def _field(self, name):
        value = self.detail.get(name)
        if value is None:
            raise IrrelevantEvent(f'{self.detail_type} event has no {name} field')

        return value


    @property
    def detail_type(self):
        return self.data.get('detail-type')


    @property
    def region(self):
        return self.detail.get('region') or self.data.get('region')


    @property
    def pipeline(self):
        return self._field('pipeline')


    @property
    def execution_id(self):
        return self._field('execution-id')


    @property
    def stage(self):
        return self._field('stage')


    @property
    def action(self):
        return self._field('action')


    @property
    def state(self):
        return self._field('state')


    @property
    def build_id(self):
        return self._field('build-id')


    @property
    def current_phase(self):
        return self._field('current-phase')
