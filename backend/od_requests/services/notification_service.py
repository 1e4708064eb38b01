"""Fire-and-forget workflow notifications.

Events are emitted as structured log records after the surrounding
transaction commits. Delivery channels (push, email) hook in here and must
never break a state transition.
"""
import logging
from typing import Callable, List

from django.db import transaction

from od_requests import models as od_models

logger = logging.getLogger(__name__)


def _log(event: str, request: od_models.Request, target_user_ids: List[int], reason: str):
    payload = {
        'event': event,
        'request_id': request.id,
        'request_type': request.type,
        'status': request.status,
        'target_user_ids': target_user_ids,
        'reason': reason,
    }
    logger.info('%s', payload)


def _students_and_requester(request: od_models.Request) -> List[int]:
    user_ids = list(
        od_models.RequestStudent.objects
        .filter(request=request)
        .values_list('student__user_id', flat=True)
    )
    if request.requested_by_id not in user_ids:
        user_ids.append(request.requested_by_id)
    return user_ids


def on_commit(func: Callable, *args):
    """Run `func(*args)` after commit; failures are logged, never raised."""
    def _run():
        try:
            func(*args)
        except Exception:
            logger.exception('Notification %s failed', getattr(func, '__name__', func))

    transaction.on_commit(_run)


def notify_request_submitted(request: od_models.Request):
    """Notify the first approver of every group that a request is waiting."""
    target_user_ids = list(
        od_models.ApprovalStep.objects
        .filter(approval__request=request, sequence=0)
        .values_list('user_id', flat=True)
    )
    _log('request_submitted', request, target_user_ids, 'New OD request needs approval')


def notify_step_opened(step: od_models.ApprovalStep):
    """Notify the approver of a newly opened step."""
    request = step.approval.request
    _log('step_opened', request, [step.user_id], f'Step {step.sequence} ({step.role}) awaiting review')


def notify_request_decided(request: od_models.Request):
    """Notify participating students and the requester of the final outcome."""
    _log('request_' + request.status.lower(), request, _students_and_requester(request), f'Request {request.status.lower()}')
