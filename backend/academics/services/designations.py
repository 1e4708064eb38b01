"""Designation assignment for teachers.

Keeps the "at most one HOD per department" rule: assigning HOD to a teacher
revokes the HOD designation of whoever held it in the same department.
"""
import logging

from django.db import transaction

from academics.models import ApproverRole, Designation, TeacherDesignation, TeacherProfile

logger = logging.getLogger(__name__)


@transaction.atomic
def assign_designation(teacher: TeacherProfile, designation: Designation) -> TeacherDesignation:
    if designation.role == ApproverRole.HOD:
        previous = (
            TeacherDesignation.objects
            .select_for_update()
            .filter(designation__role=ApproverRole.HOD, teacher__department_id=teacher.department_id)
            .exclude(teacher=teacher)
        )
        for td in previous:
            logger.info(
                'Revoking HOD designation of teacher %s in department %s (replaced by %s)',
                td.teacher_id, teacher.department_id, teacher.pk,
            )
            td.delete()

    assignment, _ = TeacherDesignation.objects.get_or_create(teacher=teacher, designation=designation)
    return assignment


def assign_hod(teacher: TeacherProfile) -> TeacherDesignation:
    designation, _ = Designation.objects.get_or_create(role=ApproverRole.HOD)
    return assign_designation(teacher, designation)
