import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

ROLE_CHOICES = [
    ('TUTOR', 'Tutor'),
    ('YEAR_INCHARGE', 'Year Incharge'),
    ('HOD', 'Head of Department'),
    ('LAB_INCHARGE', 'Lab Incharge'),
]

STATUS_CHOICES = [
    ('PENDING', 'Pending'),
    ('APPROVED', 'Approved'),
    ('REJECTED', 'Rejected'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('academics', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='FlowTemplate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=64, unique=True)),
                ('description', models.TextField(blank=True)),
            ],
            options={
                'verbose_name': 'Flow Template',
                'verbose_name_plural': 'Flow Templates',
            },
        ),
        migrations.CreateModel(
            name='FlowStep',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sequence', models.PositiveIntegerField()),
                ('role', models.CharField(choices=ROLE_CHOICES, max_length=16)),
                ('flow_template', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='steps', to='od_requests.flowtemplate')),
            ],
            options={
                'ordering': ('flow_template', 'sequence'),
                'unique_together': {('flow_template', 'sequence')},
            },
        ),
        migrations.CreateModel(
            name='Request',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('OD', 'On Duty'), ('LEAVE', 'Leave')], max_length=8)),
                ('category', models.CharField(blank=True, choices=[('PROJECT', 'Project'), ('SEMINAR', 'Seminar'), ('SYMPOSIUM', 'Symposium'), ('OTHER', 'Other')], max_length=16, null=True)),
                ('needs_lab', models.BooleanField(default=False)),
                ('reason', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, null=True)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField()),
                ('status', models.CharField(choices=STATUS_CHOICES, db_index=True, default='PENDING', max_length=16)),
                ('proof_of_od', models.FileField(blank=True, null=True, upload_to='od_requests/proofs/%Y/%m/%d/')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('flow_template', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='requests', to='od_requests.flowtemplate')),
                ('lab', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='requests', to='academics.lab')),
                ('requested_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='od_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ('-created_at',),
            },
        ),
        migrations.CreateModel(
            name='RequestStudent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('request', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='request_students', to='od_requests.request')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='request_links', to='academics.studentprofile')),
            ],
            options={
                'unique_together': {('request', 'student')},
            },
        ),
        migrations.AddField(
            model_name='request',
            name='students',
            field=models.ManyToManyField(related_name='od_requests', through='od_requests.RequestStudent', to='academics.studentprofile'),
        ),
        migrations.CreateModel(
            name='Approval',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('current_step_index', models.PositiveIntegerField(default=0)),
                ('status', models.CharField(choices=STATUS_CHOICES, default='PENDING', max_length=16)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('group', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='approvals', to='academics.group')),
                ('request', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='approvals', to='od_requests.request')),
            ],
            options={
                'ordering': ('request', 'id'),
                'unique_together': {('request', 'group')},
            },
        ),
        migrations.CreateModel(
            name='ApprovalStep',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sequence', models.PositiveIntegerField()),
                ('role', models.CharField(choices=ROLE_CHOICES, max_length=16)),
                ('status', models.CharField(choices=STATUS_CHOICES, db_index=True, default='PENDING', max_length=16)),
                ('comments', models.TextField(blank=True, null=True)),
                ('approved_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('approval', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='steps', to='od_requests.approval')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='approval_steps', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ('approval', 'sequence'),
            },
        ),
        migrations.AddConstraint(
            model_name='approvalstep',
            constraint=models.UniqueConstraint(fields=('approval', 'sequence'), name='unique_step_sequence_per_approval'),
        ),
        migrations.AddConstraint(
            model_name='approvalstep',
            constraint=models.UniqueConstraint(condition=models.Q(('status', 'PENDING')), fields=('approval',), name='unique_pending_step_per_approval'),
        ),
    ]
