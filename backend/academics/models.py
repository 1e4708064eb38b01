import logging

from django.db import models, transaction
from django.conf import settings
from django.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class ApproverRole(models.TextChoices):
    """Semantic approver roles used by flow steps and group approver mappings."""
    TUTOR = 'TUTOR', 'Tutor'
    YEAR_INCHARGE = 'YEAR_INCHARGE', 'Year Incharge'
    HOD = 'HOD', 'Head of Department'
    LAB_INCHARGE = 'LAB_INCHARGE', 'Lab Incharge'


# Roles resolved from department designations / lab records, never from GroupApprover.
SPECIAL_ROLES = (ApproverRole.HOD, ApproverRole.LAB_INCHARGE)


class Department(models.Model):
    code = models.CharField(max_length=16, unique=True)
    name = models.CharField(max_length=128)
    # Short form for display (abbreviation) e.g. 'CSE', 'EEE'
    short_name = models.CharField(max_length=32, blank=True)

    class Meta:
        ordering = ('code',)

    def __str__(self):
        display = self.short_name or self.name
        return f"{self.code} - {display}"


class TeacherProfile(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='teacher_profile'
    )
    staff_id = models.CharField(max_length=64, unique=True, db_index=True)
    department = models.ForeignKey(Department, on_delete=models.PROTECT, related_name='teachers')

    def __str__(self):
        return f"Teacher {self.staff_id} ({self.user.username})"

    def clean(self):
        # Prevent user having both student and teacher profiles
        if getattr(self.user, 'student_profile', None) is not None:
            raise ValidationError('User already has a student profile; cannot create a teacher profile.')

    def save(self, *args, **kwargs):
        # HOD is scoped to the teacher's department and does not follow a transfer.
        with transaction.atomic():
            if self.pk is not None:
                previous_department = (
                    TeacherProfile.objects.filter(pk=self.pk).values_list('department_id', flat=True).first()
                )
                if previous_department is not None and previous_department != self.department_id:
                    revoked, _ = TeacherDesignation.objects.filter(
                        teacher_id=self.pk, designation__role=ApproverRole.HOD
                    ).delete()
                    if revoked:
                        logger.info(
                            'Revoking HOD designation of teacher %s on transfer from department %s to %s',
                            self.pk, previous_department, self.department_id,
                        )
            super().save(*args, **kwargs)


class Group(models.Model):
    """A cohort of students inside one department (e.g. 'III CSE A').

    Each group approves OD requests of its students independently.
    """
    name = models.CharField(max_length=64)
    department = models.ForeignKey(Department, on_delete=models.PROTECT, related_name='groups')

    class Meta:
        unique_together = ('name', 'department')
        ordering = ('department', 'name')

    def __str__(self):
        return f"{self.department.code} / {self.name}"


class StudentProfile(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='student_profile'
    )
    reg_no = models.CharField(max_length=64, unique=True, db_index=True)
    group = models.ForeignKey(Group, on_delete=models.PROTECT, related_name='students')
    # Number of ON_DUTY requests this student has taken part in (bumped at request creation).
    od_count = models.PositiveIntegerField(default=0)

    def __str__(self):
        return f"Student {self.reg_no} ({self.user.username})"

    def clean(self):
        if getattr(self.user, 'teacher_profile', None) is not None:
            raise ValidationError('User already has a teacher profile; cannot create a student profile.')


class Lab(models.Model):
    name = models.CharField(max_length=128)
    department = models.ForeignKey(Department, on_delete=models.CASCADE, related_name='labs')
    incharge = models.ForeignKey(
        TeacherProfile,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='labs_in_charge'
    )

    class Meta:
        unique_together = ('name', 'department')

    def __str__(self):
        return f"{self.name} ({self.department.code})"

    def clean(self):
        if self.incharge_id and self.department_id and self.incharge.department_id != self.department_id:
            raise ValidationError({'incharge': 'Lab incharge must belong to the same department.'})


class Designation(models.Model):
    role = models.CharField(max_length=16, choices=ApproverRole.choices, unique=True)
    description = models.TextField(blank=True)

    def __str__(self):
        return self.get_role_display()


class TeacherDesignation(models.Model):
    """Designation held by a teacher.

    HOD designations are department-scoped through the teacher's department;
    use `academics.services.designations.assign_designation` so an existing
    HOD of the same department is revoked.
    """
    teacher = models.ForeignKey(TeacherProfile, on_delete=models.CASCADE, related_name='designations')
    designation = models.ForeignKey(Designation, on_delete=models.CASCADE, related_name='teacher_designations')
    assigned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Teacher Designation'
        verbose_name_plural = 'Teacher Designations'
        unique_together = ('teacher', 'designation')

    def __str__(self):
        return f"{self.teacher.staff_id} -> {self.designation}"


class GroupApprover(models.Model):
    """Maps (group, role) to the teacher who approves for that group."""
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='approvers')
    teacher = models.ForeignKey(TeacherProfile, on_delete=models.CASCADE, related_name='group_approvals')
    role = models.CharField(max_length=16, choices=ApproverRole.choices)

    class Meta:
        verbose_name = 'Group Approver'
        verbose_name_plural = 'Group Approvers'
        constraints = [
            models.UniqueConstraint(fields=['group', 'role'], name='unique_approver_per_group_role')
        ]

    def __str__(self):
        return f"{self.group} - {self.get_role_display()}: {self.teacher.staff_id}"

    def clean(self):
        if self.role in SPECIAL_ROLES:
            raise ValidationError({'role': f'{self.role} is resolved from designations/labs and cannot be mapped per group.'})
