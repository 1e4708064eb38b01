from django.contrib.admin.views.decorators import staff_member_required
from django.db.models import Count
from django.http import JsonResponse

from od_requests import models as od_models


@staff_member_required
def admin_counts(request):
    """Return request counts per status and the number of open approval steps.

    Used by the admin index dashboard to show the state of the workflow.
    """
    by_status = {
        row['status']: row['total']
        for row in od_models.Request.objects.values('status').annotate(total=Count('id'))
    }
    data = {
        'requests': {s: by_status.get(s, 0) for s in od_models.ApprovalStatus.values},
        'pending_steps': od_models.ApprovalStep.objects.filter(status=od_models.ApprovalStatus.PENDING).count(),
    }
    return JsonResponse(data)
