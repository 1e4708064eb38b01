"""Per-group approval state machine.

Each Approval walks the request's flow template one step at a time. Steps
are created lazily: the approver for step N+1 is resolved only when step N
is approved, so designation changes made in between are honoured.

A request's status is derived from its approvals by `compute_request_status`:
any rejection rejects the whole request, all approvals approved approves it.
"""
import logging
from typing import Dict, Iterable, Optional

from django.db import transaction
from django.utils import timezone

from od_requests import models as od_models
from od_requests.exceptions import InvalidDecision, NoPendingStepForUser
from od_requests.services import approver_resolver, flow_selector, notification_service

logger = logging.getLogger(__name__)

ApprovalStatus = od_models.ApprovalStatus

MSG_REJECTED = 'Request rejected'
MSG_ADVANCED = 'Step approved, moved to next approver'
MSG_GROUP_REJECTION = 'Request rejected due to one group rejection'
MSG_FULLY_APPROVED = 'Request fully approved'
MSG_AWAITING_GROUPS = 'Group approval completed, awaiting other groups'


def compute_request_status(statuses: Iterable[str]) -> str:
    """Aggregate Approval statuses into the Request status.

    REJECTED wins over everything, APPROVED needs every approval approved,
    anything else (including no approvals at all) is PENDING.
    """
    statuses = list(statuses)
    if ApprovalStatus.REJECTED in statuses:
        return ApprovalStatus.REJECTED
    if statuses and all(s == ApprovalStatus.APPROVED for s in statuses):
        return ApprovalStatus.APPROVED
    return ApprovalStatus.PENDING


def normalize_decision(decision) -> str:
    value = str(decision or '').strip().upper()
    if value not in (ApprovalStatus.APPROVED, ApprovalStatus.REJECTED):
        raise InvalidDecision()
    return value


def _close_step(step: od_models.ApprovalStep, status: str, comments: Optional[str]):
    step.status = status
    step.comments = comments
    step.approved_at = timezone.now()
    step.save(update_fields=['status', 'comments', 'approved_at'])


def _recompute_request_status(request_id) -> od_models.Request:
    # Lock the request so concurrent group completions serialize here.
    request = od_models.Request.objects.select_for_update().get(pk=request_id)
    statuses = od_models.Approval.objects.filter(request_id=request_id).values_list('status', flat=True)
    new_status = compute_request_status(statuses)
    if new_status != request.status:
        request.status = new_status
        request.save(update_fields=['status', 'updated_at'])
        logger.info('Request %s is now %s', request.pk, new_status)
        if new_status != ApprovalStatus.PENDING:
            notification_service.on_commit(notification_service.notify_request_decided, request)
    return request


def process_approval_step(acting_user, request_id, decision, comments: Optional[str] = None) -> Dict[str, str]:
    """Apply `acting_user`'s decision to their pending step on `request_id`.

    Returns ``{"message": ..., "status": ...}`` where status is the request
    status after the transition (PENDING while a group is still advancing).

    Raises `InvalidDecision`, `NoPendingStepForUser` (nothing to act on, e.g.
    a second click or a lost race) and any resolver error while opening the
    next step; the latter rolls back the whole transition.
    """
    decision = normalize_decision(decision)

    with transaction.atomic():
        step = (
            od_models.ApprovalStep.objects
            .select_for_update(of=('self',))
            .select_related('approval__group', 'approval__request__flow_template', 'approval__request__lab')
            .filter(approval__request_id=request_id, user=acting_user, status=ApprovalStatus.PENDING)
            .first()
        )
        if step is None:
            logger.info('User %s has no pending step on request %s', getattr(acting_user, 'pk', None), request_id)
            raise NoPendingStepForUser(getattr(acting_user, 'pk', None), request_id)

        approval = step.approval
        request = approval.request

        if decision == ApprovalStatus.REJECTED:
            _close_step(step, ApprovalStatus.REJECTED, comments)
            approval.status = ApprovalStatus.REJECTED
            approval.save(update_fields=['status', 'updated_at'])
            logger.info(
                'Step %s (%s) of request %s rejected by user %s for group %s',
                step.sequence, step.role, request.pk, acting_user.pk, approval.group_id,
            )
            request = _recompute_request_status(request.pk)
            return {'message': MSG_REJECTED, 'status': request.status}

        flow_steps = flow_selector.get_flow_steps(request.flow_template)
        next_index = approval.current_step_index + 1

        if next_index < len(flow_steps):
            next_role = flow_steps[next_index].role
            # Resolve before writing; a failure here leaves the step pending.
            next_user = approver_resolver.resolve_approver(approval.group, next_role, request)
            _close_step(step, ApprovalStatus.APPROVED, comments)
            next_step = od_models.ApprovalStep.objects.create(
                approval=approval,
                sequence=next_index,
                role=next_role,
                user=next_user,
                status=ApprovalStatus.PENDING,
            )
            approval.current_step_index = next_index
            approval.save(update_fields=['current_step_index', 'updated_at'])
            logger.info(
                'Request %s group %s advanced to step %s (%s) for user %s',
                request.pk, approval.group_id, next_index, next_role, next_user.pk,
            )
            notification_service.on_commit(notification_service.notify_step_opened, next_step)
            return {'message': MSG_ADVANCED, 'status': request.status}

        _close_step(step, ApprovalStatus.APPROVED, comments)
        approval.status = ApprovalStatus.APPROVED
        approval.save(update_fields=['status', 'updated_at'])
        logger.info('Request %s group %s completed all steps', request.pk, approval.group_id)

        request = _recompute_request_status(request.pk)
        if request.status == ApprovalStatus.REJECTED:
            message = MSG_GROUP_REJECTION
        elif request.status == ApprovalStatus.APPROVED:
            message = MSG_FULLY_APPROVED
        else:
            message = MSG_AWAITING_GROUPS
        return {'message': message, 'status': request.status}
