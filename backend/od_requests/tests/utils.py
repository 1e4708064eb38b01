import datetime

from django.contrib.auth import get_user_model

from academics.models import ApproverRole, Department, Group, GroupApprover, Lab, StudentProfile, TeacherProfile
from academics.services.designations import assign_hod
from od_requests.services import flow_selector

User = get_user_model()

START = datetime.date(2026, 3, 2)
END = datetime.date(2026, 3, 3)


def make_user(username, role=User.UserRole.STUDENT, **extra):
    return User.objects.create_user(username=username, password='pass1234', role=role, **extra)


def make_teacher(username, department):
    user = make_user(username, role=User.UserRole.TEACHER)
    return TeacherProfile.objects.create(user=user, staff_id=username.upper(), department=department)


def make_student(username, group, od_count=0):
    user = make_user(username)
    return StudentProfile.objects.create(user=user, reg_no=username.upper(), group=group, od_count=od_count)


class Campus:
    """Two departments with one group each, a shared lab and per-department HODs.

    CSE / G1: tutor1, hod_cse, students s1 and s3
    ECE / G2: tutor2, hod_ece, student s2
    Lab "IoT Lab" (CSE) is run by lab_incharge.
    """

    def __init__(self):
        flow_selector.ensure_default_flow_templates()

        self.cse = Department.objects.create(code='CSE', name='Computer Science')
        self.ece = Department.objects.create(code='ECE', name='Electronics')
        self.g1 = Group.objects.create(name='III CSE A', department=self.cse)
        self.g2 = Group.objects.create(name='III ECE A', department=self.ece)

        self.tutor1 = make_teacher('tutor1', self.cse)
        self.tutor2 = make_teacher('tutor2', self.ece)
        self.hod_cse = make_teacher('hod_cse', self.cse)
        self.hod_ece = make_teacher('hod_ece', self.ece)
        self.lab_incharge = make_teacher('lab_incharge', self.cse)

        GroupApprover.objects.create(group=self.g1, teacher=self.tutor1, role=ApproverRole.TUTOR)
        GroupApprover.objects.create(group=self.g2, teacher=self.tutor2, role=ApproverRole.TUTOR)
        assign_hod(self.hod_cse)
        assign_hod(self.hod_ece)

        self.lab = Lab.objects.create(name='IoT Lab', department=self.cse, incharge=self.lab_incharge)

        self.s1 = make_student('s1', self.g1)
        self.s2 = make_student('s2', self.g2)
        self.s3 = make_student('s3', self.g1)


def request_kwargs(campus, **overrides):
    kwargs = {
        'type': 'OD',
        'category': 'SYMPOSIUM',
        'needs_lab': False,
        'reason': 'Paper presentation',
        'start_date': START,
        'end_date': END,
        'submitter': campus.s1.user,
        'student_ids': [campus.s1.pk],
    }
    kwargs.update(overrides)
    return kwargs
