from django.conf import settings
from django.db import models
from django.db.models import Q

from academics.models import ApproverRole


class ApprovalStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    APPROVED = 'APPROVED', 'Approved'
    REJECTED = 'REJECTED', 'Rejected'


class FlowTemplate(models.Model):
    name = models.CharField(max_length=64, unique=True)
    description = models.TextField(blank=True)

    class Meta:
        verbose_name = 'Flow Template'
        verbose_name_plural = 'Flow Templates'

    def __str__(self):
        return self.name

    def ordered_steps(self):
        return list(self.steps.order_by('sequence'))


class FlowStep(models.Model):
    flow_template = models.ForeignKey(
        FlowTemplate,
        on_delete=models.CASCADE,
        related_name='steps'
    )
    sequence = models.PositiveIntegerField()
    role = models.CharField(max_length=16, choices=ApproverRole.choices)

    class Meta:
        ordering = ('flow_template', 'sequence')
        unique_together = (('flow_template', 'sequence'),)

    def __str__(self):
        return f"{self.flow_template} - Step {self.sequence} ({self.role})"


class Request(models.Model):
    class RequestType(models.TextChoices):
        ON_DUTY = 'OD', 'On Duty'
        LEAVE = 'LEAVE', 'Leave'

    class ODCategory(models.TextChoices):
        PROJECT = 'PROJECT', 'Project'
        SEMINAR = 'SEMINAR', 'Seminar'
        SYMPOSIUM = 'SYMPOSIUM', 'Symposium'
        OTHER = 'OTHER', 'Other'

    type = models.CharField(max_length=8, choices=RequestType.choices)
    category = models.CharField(max_length=16, choices=ODCategory.choices, null=True, blank=True)
    needs_lab = models.BooleanField(default=False)
    reason = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    start_date = models.DateField()
    end_date = models.DateField()
    lab = models.ForeignKey(
        'academics.Lab',
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name='requests'
    )
    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='od_requests'
    )
    flow_template = models.ForeignKey(
        FlowTemplate,
        on_delete=models.PROTECT,
        related_name='requests'
    )
    students = models.ManyToManyField(
        'academics.StudentProfile',
        through='RequestStudent',
        related_name='od_requests'
    )
    # Derived from the request's approvals; written only by the approval engine.
    status = models.CharField(max_length=16, choices=ApprovalStatus.choices, default=ApprovalStatus.PENDING, db_index=True)
    proof_of_od = models.FileField(upload_to='od_requests/proofs/%Y/%m/%d/', null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('-created_at',)

    def __str__(self):
        return f"{self.get_type_display()} #{self.pk} by {self.requested_by} ({self.status})"


class RequestStudent(models.Model):
    request = models.ForeignKey(Request, on_delete=models.CASCADE, related_name='request_students')
    student = models.ForeignKey('academics.StudentProfile', on_delete=models.CASCADE, related_name='request_links')

    class Meta:
        unique_together = (('request', 'student'),)

    def __str__(self):
        return f"{self.request_id} - {self.student.reg_no}"


class Approval(models.Model):
    """Per-group approval of one request; walks the request's flow template."""
    request = models.ForeignKey(Request, on_delete=models.CASCADE, related_name='approvals')
    group = models.ForeignKey('academics.Group', on_delete=models.PROTECT, related_name='approvals')
    current_step_index = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=16, choices=ApprovalStatus.choices, default=ApprovalStatus.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('request', 'id')
        unique_together = (('request', 'group'),)

    def __str__(self):
        return f"Request {self.request_id} / {self.group} ({self.status})"


class ApprovalStep(models.Model):
    approval = models.ForeignKey(Approval, on_delete=models.CASCADE, related_name='steps')
    sequence = models.PositiveIntegerField()
    # Role this step was resolved for; kept so history survives template edits.
    role = models.CharField(max_length=16, choices=ApproverRole.choices)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='approval_steps'
    )
    status = models.CharField(max_length=16, choices=ApprovalStatus.choices, default=ApprovalStatus.PENDING, db_index=True)
    comments = models.TextField(blank=True, null=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('approval', 'sequence')
        constraints = [
            models.UniqueConstraint(fields=['approval', 'sequence'], name='unique_step_sequence_per_approval'),
            # At most one open step per approval
            models.UniqueConstraint(fields=['approval'], condition=Q(status='PENDING'), name='unique_pending_step_per_approval'),
        ]

    def __str__(self):
        return f"{self.approval} - Step {self.sequence} ({self.role}, {self.status})"
