from django.core.management.base import BaseCommand

from academics.models import ApproverRole, Designation
from od_requests.services import flow_selector


class Command(BaseCommand):
    help = 'Create the LabFlow / NoLabFlow approval templates and the approver designations'

    def add_arguments(self, parser):
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Replace the steps of existing templates not yet used by any request with the defaults',
        )

    def handle(self, *args, **options):
        for name, outcome in flow_selector.ensure_default_flow_templates(reset=options['reset']).items():
            if outcome == flow_selector.SEEDED_CREATED:
                self.stdout.write(self.style.SUCCESS(f'Created flow template {name}'))
            elif outcome == flow_selector.SEEDED_RESET:
                self.stdout.write(f'Reset steps of flow template {name}')
            elif outcome == flow_selector.SEEDED_IN_USE:
                self.stdout.write(self.style.WARNING(f'Skipped flow template {name}: referenced by existing requests'))
            else:
                self.stdout.write(f'Flow template {name} already exists')

        for role in ApproverRole.values:
            _, created = Designation.objects.get_or_create(role=role, defaults={'description': ApproverRole(role).label})
            if created:
                self.stdout.write(self.style.SUCCESS(f'Created designation {role}'))

        self.stdout.write('Done.')
