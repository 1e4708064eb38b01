"""Authority resolver utilities for approvals.

Maps a semantic approver role for a group to the concrete `TeacherProfile`
who holds it right now. Three data sources are involved:

- LAB_INCHARGE (on requests that need a lab): the incharge of the request's lab
- HOD: the teacher holding the HOD designation in the group's department
- every other role: the group's `GroupApprover` row for that role

All functions are read-only and never cache; the approval engine calls them
again at each step so organisational changes between steps are honoured.
"""
import logging
from typing import Callable, Dict

from academics.models import ApproverRole, Group, GroupApprover, TeacherDesignation, TeacherProfile
from od_requests.exceptions import ApproverNotFound, LabInchargeMissing, NoHodForDepartment

logger = logging.getLogger(__name__)


def get_group_approver(group: Group, role: str, request=None) -> TeacherProfile:
    """Return the teacher mapped to (`group`, `role`) in the GroupApprover table."""
    mapping = (
        GroupApprover.objects
        .filter(group=group, role=role)
        .select_related('teacher__user')
        .first()
    )
    if mapping is None:
        raise ApproverNotFound(group.pk, role)
    return mapping.teacher


def get_department_hod(group: Group, role: str = ApproverRole.HOD, request=None) -> TeacherProfile:
    """Return the current HOD of `group`'s department.

    The designation service keeps at most one HOD per department; if several
    rows exist anyway the most recent assignment wins.
    """
    hod = (
        TeacherDesignation.objects
        .filter(designation__role=ApproverRole.HOD, teacher__department_id=group.department_id)
        .select_related('teacher__user')
        .order_by('-assigned_at', '-id')
        .first()
    )
    if hod is None:
        raise NoHodForDepartment(group.department_id)
    return hod.teacher


def get_lab_incharge(group: Group, role: str = ApproverRole.LAB_INCHARGE, request=None) -> TeacherProfile:
    """Return the incharge of the lab referenced by `request`."""
    lab = getattr(request, 'lab', None)
    if lab is None or lab.incharge_id is None:
        raise LabInchargeMissing(getattr(request, 'lab_id', None))
    return TeacherProfile.objects.select_related('user').get(pk=lab.incharge_id)


def _lab_strategy(group: Group, role: str, request=None) -> TeacherProfile:
    # A lab step on a request without a lab falls back to the per-group table.
    if request is not None and request.needs_lab:
        return get_lab_incharge(group, role, request)
    return get_group_approver(group, role, request)


RESOLVERS: Dict[str, Callable[..., TeacherProfile]] = {
    ApproverRole.HOD: get_department_hod,
    ApproverRole.LAB_INCHARGE: _lab_strategy,
}


def resolve_approver(group: Group, role: str, request=None) -> TeacherProfile:
    """Resolve the approver `TeacherProfile` for `role` within `group`.

    Raises `ApproverNotFound`, `NoHodForDepartment` or `LabInchargeMissing`
    when the role has no holder; there is no fallback to another role.
    """
    role_key = str(role).strip().upper()
    strategy = RESOLVERS.get(role_key, get_group_approver)
    teacher = strategy(group, role_key, request)
    logger.debug('Resolved role %s for group %s to teacher %s', role_key, group.pk, teacher.pk)
    return teacher
