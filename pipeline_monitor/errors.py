class PipelineMonitorError(Exception):
    pass


class MalformedReference(PipelineMonitorError):
    """A revision string does not have the expected shape."""


class ResolutionFailure(PipelineMonitorError):
    """An external query did not return exactly one usable result."""


class UnsupportedSource(PipelineMonitorError):
    pass


class RenderError(PipelineMonitorError):
    pass


class StatusUpdateFailed(PipelineMonitorError):
    pass


class CommentCreateFailed(PipelineMonitorError):
    pass


class BestEffortCleanupFailed(PipelineMonitorError):
    """An old log comment could not be removed. Never raised, only logged."""
