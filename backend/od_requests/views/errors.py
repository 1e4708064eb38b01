import logging

from rest_framework.response import Response

from od_requests.exceptions import ResolutionError, StateViolation, WorkflowError

logger = logging.getLogger('od_requests.views')


def workflow_error_response(exc: WorkflowError) -> Response:
    """Translate a workflow error into ``{"detail": ..., **context}``."""
    if isinstance(exc, ResolutionError):
        logger.warning('Approver resolution failed: %s %s', exc.message, exc.context)
    elif isinstance(exc, StateViolation):
        logger.info('Rejected state transition: %s %s', exc.message, exc.context)
    return Response(exc.as_response_data(), status=exc.status_code)
