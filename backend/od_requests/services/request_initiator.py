"""Create OD / leave requests and open their per-group approvals.

Everything happens in one transaction: OD counter increments, the request
row, student links, one Approval per affected group and the first
ApprovalStep of each. Any failure (validation, a group with no approver for
the first role, ...) leaves the database untouched.
"""
import logging
from typing import Iterable, List, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F

from academics.models import Group, Lab, StudentProfile
from od_requests import models as od_models
from od_requests.exceptions import (
    InvalidDateRange,
    InvalidSubmitter,
    LabNotFound,
    LabRequired,
    NoStudents,
    OdLimitExceeded,
    RequestValidationError,
    ResolutionError,
    UnknownStudents,
)
from od_requests.services import approver_resolver, flow_selector, notification_service

logger = logging.getLogger(__name__)

RequestType = od_models.Request.RequestType


def od_request_limit() -> int:
    return int(getattr(settings, 'OD_REQUEST_LIMIT', 10))


def _distinct(values: Iterable) -> List:
    return list(dict.fromkeys(values))


def _validate_input(type, category, needs_lab, start_date, end_date, lab_id, student_ids):
    if type not in RequestType.values:
        raise RequestValidationError('Invalid request type', type=type)
    if category and category not in od_models.Request.ODCategory.values:
        raise RequestValidationError('Invalid OD category', category=category)
    if end_date < start_date:
        raise InvalidDateRange()
    if needs_lab and not lab_id:
        raise LabRequired()
    if not student_ids:
        raise NoStudents()


def create_request(
    *,
    type: str,
    reason: str,
    start_date,
    end_date,
    submitter,
    student_ids: Iterable[int],
    needs_lab: bool = False,
    category: Optional[str] = None,
    description: Optional[str] = None,
    lab_id: Optional[int] = None,
) -> od_models.Request:
    """Validate and create a request, returning it with related data loaded.

    Raises a `RequestValidationError` subclass for bad input (including
    `OdLimitExceeded`) and a `ResolutionError` subclass when the flow template
    or a first-step approver cannot be resolved.
    """
    student_ids = _distinct(student_ids or [])
    _validate_input(type, category, needs_lab, start_date, end_date, lab_id, student_ids)

    lab = None
    if lab_id:
        lab = Lab.objects.filter(pk=lab_id).first()
        if lab is None:
            raise LabNotFound(lab_id)

    if getattr(submitter, 'student_profile', None) is None:
        raise InvalidSubmitter()

    template = flow_selector.select_flow_template(needs_lab)
    flow_steps = flow_selector.get_flow_steps(template)
    if not flow_steps:
        raise ResolutionError(f'Flow template {template.name} has no steps', flow_template=template.name)
    first_step = flow_steps[0]

    with transaction.atomic():
        # Lock participants so concurrent requests cannot both pass the OD cap.
        students = list(StudentProfile.objects.select_for_update().filter(pk__in=student_ids).order_by('pk'))
        missing = set(student_ids) - {s.pk for s in students}
        if missing:
            raise UnknownStudents(missing)

        if type == RequestType.ON_DUTY:
            limit = od_request_limit()
            over_limit = [s.reg_no for s in students if s.od_count >= limit]
            if over_limit:
                raise OdLimitExceeded(over_limit, limit)
            StudentProfile.objects.filter(pk__in=[s.pk for s in students]).update(od_count=F('od_count') + 1)

        request = od_models.Request.objects.create(
            type=type,
            category=category or None,
            needs_lab=needs_lab,
            reason=reason,
            description=description,
            start_date=start_date,
            end_date=end_date,
            lab=lab,
            requested_by=submitter,
            flow_template=template,
            status=od_models.ApprovalStatus.PENDING,
        )
        od_models.RequestStudent.objects.bulk_create([
            od_models.RequestStudent(request=request, student=s) for s in students
        ])

        # One approval per distinct group, in order of first appearance.
        by_id = {s.pk: s for s in students}
        group_ids = _distinct(by_id[sid].group_id for sid in student_ids)
        groups = Group.objects.in_bulk(group_ids)

        for group_id in group_ids:
            group = groups[group_id]
            approval = od_models.Approval.objects.create(
                request=request,
                group=group,
                current_step_index=0,
                status=od_models.ApprovalStatus.PENDING,
            )
            approver = approver_resolver.resolve_approver(group, first_step.role, request)
            od_models.ApprovalStep.objects.create(
                approval=approval,
                sequence=0,
                role=first_step.role,
                user=approver,
                status=od_models.ApprovalStatus.PENDING,
            )

        logger.info(
            'Created %s request %s for %d student(s) across %d group(s) using %s',
            type, request.pk, len(students), len(group_ids), template.name,
        )
        notification_service.on_commit(notification_service.notify_request_submitted, request)

    return get_request_detail(request.pk)


def get_request_detail(request_id) -> od_models.Request:
    return (
        od_models.Request.objects
        .select_related('lab__incharge__user', 'requested_by', 'flow_template')
        .prefetch_related(
            'students__user',
            'students__group__department',
            'flow_template__steps',
            'approvals__group',
            'approvals__steps__user',
        )
        .get(pk=request_id)
    )
