"""Read-only request listings for approvers, students, teachers and admins."""
from dataclasses import dataclass, field
from typing import List

from django.db.models import Prefetch, Q

from academics.models import ApproverRole, Group, TeacherDesignation
from od_requests import models as od_models
from od_requests.exceptions import NotAStudent, NotATeacher


@dataclass
class PendingApproval:
    """A pending step held by a user plus the history of its approval."""
    step: od_models.ApprovalStep
    request: od_models.Request
    history: List[od_models.ApprovalStep] = field(default_factory=list)

    @property
    def group(self):
        return self.step.approval.group


def _request_queryset():
    return (
        od_models.Request.objects
        .select_related('lab__incharge__user', 'requested_by', 'flow_template')
        .prefetch_related(
            'students__user',
            'students__group',
            Prefetch(
                'approvals',
                queryset=od_models.Approval.objects.select_related('group').prefetch_related(
                    Prefetch('steps', queryset=od_models.ApprovalStep.objects.select_related('user').order_by('sequence'))
                ),
            ),
        )
    )


def requests_pending_for(user) -> List[PendingApproval]:
    """Return every PENDING step `user` holds, oldest request first."""
    steps = list(
        od_models.ApprovalStep.objects
        .filter(user=user, status=od_models.ApprovalStatus.PENDING)
        .select_related('approval__group')
        .order_by('approval__request__created_at', 'approval__request_id', 'approval_id')
    )
    if not steps:
        return []

    requests = _request_queryset().in_bulk({s.approval.request_id for s in steps})

    history_by_approval = {}
    earlier = (
        od_models.ApprovalStep.objects
        .filter(approval_id__in={s.approval_id for s in steps})
        .exclude(status=od_models.ApprovalStatus.PENDING)
        .select_related('user')
        .order_by('sequence')
    )
    for h in earlier:
        history_by_approval.setdefault(h.approval_id, []).append(h)

    return [
        PendingApproval(
            step=s,
            request=requests[s.approval.request_id],
            history=[h for h in history_by_approval.get(s.approval_id, []) if h.sequence < s.sequence],
        )
        for s in steps
    ]


def requests_for_student(user):
    """Requests the student takes part in or submitted, newest first."""
    profile = getattr(user, 'student_profile', None)
    if profile is None:
        raise NotAStudent()
    return (
        _request_queryset()
        .filter(Q(request_students__student=profile) | Q(requested_by=user))
        .distinct()
        .order_by('-created_at', '-id')
    )


def affiliated_group_ids(teacher) -> List[int]:
    """Groups the teacher approves for directly or heads as department HOD."""
    direct = set(teacher.group_approvals.values_list('group_id', flat=True))
    hod_departments = (
        TeacherDesignation.objects
        .filter(teacher=teacher, designation__role=ApproverRole.HOD)
        .values_list('teacher__department_id', flat=True)
    )
    via_hod = set(Group.objects.filter(department_id__in=hod_departments).values_list('id', flat=True))
    return sorted(direct | via_hod)


def requests_for_affiliated_groups(user):
    """Requests touching any group the teacher is affiliated with, newest first."""
    teacher = getattr(user, 'teacher_profile', None)
    if teacher is None:
        raise NotATeacher()
    group_ids = affiliated_group_ids(teacher)
    if not group_ids:
        return od_models.Request.objects.none()
    return (
        _request_queryset()
        .filter(approvals__group_id__in=group_ids)
        .distinct()
        .order_by('-created_at', '-id')
    )


def all_requests():
    return _request_queryset().order_by('-created_at', '-id')


def get_request(request_id) -> od_models.Request:
    return _request_queryset().get(pk=request_id)
