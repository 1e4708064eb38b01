"""Choose the approval flow a request walks through.

Selection depends only on whether the request needs lab access. The two
templates are seeded by `manage.py seed_flow_templates`.
"""
import logging
from typing import Dict, List, Optional

from django.conf import settings
from django.db import transaction

from academics.models import ApproverRole
from od_requests import models as od_models
from od_requests.exceptions import FlowTemplateNotFound

logger = logging.getLogger(__name__)


def flow_template_name(needs_lab: bool) -> str:
    if needs_lab:
        return getattr(settings, 'OD_LAB_FLOW_NAME', 'LabFlow')
    return getattr(settings, 'OD_NO_LAB_FLOW_NAME', 'NoLabFlow')


def select_flow_template(needs_lab: bool) -> od_models.FlowTemplate:
    name = flow_template_name(needs_lab)
    template = od_models.FlowTemplate.objects.filter(name=name).first()
    if template is None:
        raise FlowTemplateNotFound(name)
    return template


def get_flow_steps(template: od_models.FlowTemplate) -> List[od_models.FlowStep]:
    """Return the template's steps in ascending sequence order.

    An approval's step index is the 0-based position in this list.
    """
    return list(template.steps.order_by('sequence'))


def get_step_at(template: od_models.FlowTemplate, index: int) -> Optional[od_models.FlowStep]:
    steps = get_flow_steps(template)
    if 0 <= index < len(steps):
        return steps[index]
    return None


def default_flow_definitions() -> Dict[str, List[str]]:
    return {
        flow_template_name(True): [ApproverRole.TUTOR, ApproverRole.LAB_INCHARGE, ApproverRole.HOD],
        flow_template_name(False): [ApproverRole.TUTOR, ApproverRole.HOD],
    }


SEEDED_CREATED = 'created'
SEEDED_RESET = 'reset'
SEEDED_EXISTS = 'exists'
SEEDED_IN_USE = 'in_use'


@transaction.atomic
def ensure_default_flow_templates(reset: bool = False) -> Dict[str, str]:
    """Create the lab and no-lab templates if missing.

    Existing templates keep their steps unless `reset` is set, in which case
    the steps are replaced with the defaults. Templates already referenced by
    a request are never rewritten, since their approvals track progress by
    step position. Returns ``{name: outcome}`` with one of the ``SEEDED_*``
    values.
    """
    result = {}
    for name, roles in default_flow_definitions().items():
        template, created = od_models.FlowTemplate.objects.get_or_create(
            name=name,
            defaults={'description': ' > '.join(roles)},
        )
        if created:
            outcome = SEEDED_CREATED
        elif not reset:
            outcome = SEEDED_EXISTS
        elif template.requests.exists():
            logger.warning('Not resetting steps of flow template %s: it is referenced by requests', name)
            outcome = SEEDED_IN_USE
        else:
            outcome = SEEDED_RESET

        if outcome in (SEEDED_CREATED, SEEDED_RESET):
            template.steps.all().delete()
            od_models.FlowStep.objects.bulk_create([
                od_models.FlowStep(flow_template=template, sequence=i, role=role)
                for i, role in enumerate(roles)
            ])
        result[name] = outcome
    return result
