from django.db import migrations

FLOWS = {
    'LabFlow': ['TUTOR', 'LAB_INCHARGE', 'HOD'],
    'NoLabFlow': ['TUTOR', 'HOD'],
}

DESIGNATIONS = {
    'TUTOR': 'Tutor',
    'YEAR_INCHARGE': 'Year Incharge',
    'HOD': 'Head of Department',
    'LAB_INCHARGE': 'Lab Incharge',
}


def seed_flows(apps, schema_editor):
    FlowTemplate = apps.get_model('od_requests', 'FlowTemplate')
    FlowStep = apps.get_model('od_requests', 'FlowStep')
    Designation = apps.get_model('academics', 'Designation')

    for name, roles in FLOWS.items():
        template, created = FlowTemplate.objects.get_or_create(name=name, defaults={'description': ' > '.join(roles)})
        if not created:
            continue
        for sequence, role in enumerate(roles):
            FlowStep.objects.create(flow_template=template, sequence=sequence, role=role)

    for role, description in DESIGNATIONS.items():
        Designation.objects.get_or_create(role=role, defaults={'description': description})


def unseed_flows(apps, schema_editor):
    FlowTemplate = apps.get_model('od_requests', 'FlowTemplate')
    Request = apps.get_model('od_requests', 'Request')
    # Templates referenced by requests are protected; leave those in place.
    used = Request.objects.values_list('flow_template_id', flat=True)
    FlowTemplate.objects.filter(name__in=FLOWS.keys()).exclude(pk__in=used).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('od_requests', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_flows, unseed_flows),
    ]
