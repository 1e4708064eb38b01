from django.test import SimpleTestCase, TestCase

from academics.models import TeacherDesignation
from academics.services.designations import assign_hod
from od_requests import models as od_models
from od_requests.exceptions import InvalidDecision, NoHodForDepartment, NoPendingStepForUser
from od_requests.services import approval_engine
from od_requests.services.approval_engine import compute_request_status, process_approval_step
from od_requests.services.request_initiator import create_request
from od_requests.tests.utils import Campus, make_teacher, request_kwargs


class ComputeRequestStatusTests(SimpleTestCase):
    def test_any_rejection_rejects(self):
        self.assertEqual(compute_request_status(['APPROVED', 'REJECTED', 'PENDING']), 'REJECTED')

    def test_all_approved_approves(self):
        self.assertEqual(compute_request_status(['APPROVED', 'APPROVED']), 'APPROVED')

    def test_otherwise_pending(self):
        self.assertEqual(compute_request_status(['APPROVED', 'PENDING']), 'PENDING')
        self.assertEqual(compute_request_status([]), 'PENDING')


class ProcessApprovalStepTests(TestCase):
    def setUp(self):
        self.campus = Campus()

    def _create(self, **overrides):
        return create_request(**request_kwargs(self.campus, **overrides))

    def _steps(self, req, group):
        approval = od_models.Approval.objects.get(request=req, group=group)
        return approval, list(approval.steps.order_by('sequence'))

    def test_reject_first_step(self):
        c = self.campus
        req = self._create()

        result = process_approval_step(c.tutor1.user, req.pk, 'REJECTED', comments='Clashes with exams')

        self.assertEqual(result, {'message': approval_engine.MSG_REJECTED, 'status': 'REJECTED'})
        approval, steps = self._steps(req, c.g1)
        self.assertEqual(approval.status, 'REJECTED')
        self.assertEqual(len(steps), 1)
        self.assertEqual(steps[0].status, 'REJECTED')
        self.assertEqual(steps[0].comments, 'Clashes with exams')
        self.assertIsNotNone(steps[0].approved_at)
        req.refresh_from_db()
        self.assertEqual(req.status, 'REJECTED')

    def test_approve_opens_next_step_for_resolved_role(self):
        c = self.campus
        req = self._create()

        result = process_approval_step(c.tutor1.user, req.pk, 'approved')

        self.assertEqual(result, {'message': approval_engine.MSG_ADVANCED, 'status': 'PENDING'})
        approval, steps = self._steps(req, c.g1)
        self.assertEqual(approval.current_step_index, 1)
        self.assertEqual([s.status for s in steps], ['APPROVED', 'PENDING'])
        self.assertEqual(steps[1].role, 'HOD')
        self.assertEqual(steps[1].user, c.hod_cse.user)

    def test_single_group_fully_approved(self):
        c = self.campus
        req = self._create()
        process_approval_step(c.tutor1.user, req.pk, 'APPROVED')

        result = process_approval_step(c.hod_cse.user, req.pk, 'APPROVED')

        self.assertEqual(result, {'message': approval_engine.MSG_FULLY_APPROVED, 'status': 'APPROVED'})
        req.refresh_from_db()
        self.assertEqual(req.status, 'APPROVED')

    def test_groups_complete_independently(self):
        c = self.campus
        req = self._create(student_ids=[c.s1.pk, c.s2.pk])

        process_approval_step(c.tutor1.user, req.pk, 'APPROVED')
        result = process_approval_step(c.hod_cse.user, req.pk, 'APPROVED')
        self.assertEqual(result, {'message': approval_engine.MSG_AWAITING_GROUPS, 'status': 'PENDING'})

        process_approval_step(c.tutor2.user, req.pk, 'APPROVED')
        result = process_approval_step(c.hod_ece.user, req.pk, 'APPROVED')
        self.assertEqual(result, {'message': approval_engine.MSG_FULLY_APPROVED, 'status': 'APPROVED'})

    def test_late_rejection_rejects_request(self):
        c = self.campus
        req = self._create(student_ids=[c.s1.pk, c.s2.pk])
        process_approval_step(c.tutor1.user, req.pk, 'APPROVED')
        process_approval_step(c.hod_cse.user, req.pk, 'APPROVED')

        result = process_approval_step(c.tutor2.user, req.pk, 'REJECTED')

        self.assertEqual(result['status'], 'REJECTED')
        req.refresh_from_db()
        self.assertEqual(req.status, 'REJECTED')

    def test_completing_group_after_rejection_keeps_request_rejected(self):
        c = self.campus
        req = self._create(student_ids=[c.s1.pk, c.s2.pk])
        process_approval_step(c.tutor2.user, req.pk, 'REJECTED')

        process_approval_step(c.tutor1.user, req.pk, 'APPROVED')
        result = process_approval_step(c.hod_cse.user, req.pk, 'APPROVED')

        self.assertEqual(result, {'message': approval_engine.MSG_GROUP_REJECTION, 'status': 'REJECTED'})
        approval, _ = self._steps(req, c.g1)
        self.assertEqual(approval.status, 'APPROVED')

    def test_second_action_on_same_step_fails(self):
        c = self.campus
        req = self._create()
        process_approval_step(c.tutor1.user, req.pk, 'APPROVED')

        with self.assertRaises(NoPendingStepForUser) as ctx:
            process_approval_step(c.tutor1.user, req.pk, 'APPROVED')
        self.assertEqual(ctx.exception.status_code, 409)

    def test_user_without_step_cannot_act(self):
        c = self.campus
        req = self._create()
        with self.assertRaises(NoPendingStepForUser):
            process_approval_step(c.hod_cse.user, req.pk, 'APPROVED')

    def test_invalid_decision(self):
        c = self.campus
        req = self._create()
        with self.assertRaises(InvalidDecision):
            process_approval_step(c.tutor1.user, req.pk, 'MAYBE')
        _, steps = self._steps(req, c.g1)
        self.assertEqual(steps[0].status, 'PENDING')

    def test_lab_scenario_group_rejection_while_other_group_pending(self):
        c = self.campus
        req = self._create(needs_lab=True, lab_id=c.lab.pk, student_ids=[c.s1.pk, c.s2.pk])

        process_approval_step(c.tutor1.user, req.pk, 'APPROVED')
        process_approval_step(c.tutor2.user, req.pk, 'APPROVED')

        # Both groups now wait on the same lab incharge.
        pending = od_models.ApprovalStep.objects.filter(approval__request=req, status='PENDING')
        self.assertEqual({s.role for s in pending}, {'LAB_INCHARGE'})
        self.assertEqual({s.user for s in pending}, {c.lab_incharge.user})

        process_approval_step(c.lab_incharge.user, req.pk, 'APPROVED')
        process_approval_step(c.lab_incharge.user, req.pk, 'APPROVED')

        _, g1_steps = self._steps(req, c.g1)
        _, g2_steps = self._steps(req, c.g2)
        self.assertEqual(g1_steps[2].user, c.hod_cse.user)
        self.assertEqual(g2_steps[2].user, c.hod_ece.user)

        result = process_approval_step(c.hod_cse.user, req.pk, 'REJECTED')
        self.assertEqual(result['status'], 'REJECTED')
        g2_approval, g2_steps = self._steps(req, c.g2)
        self.assertEqual(g2_approval.status, 'PENDING')
        self.assertEqual(g2_steps[2].status, 'PENDING')

        result = process_approval_step(c.hod_ece.user, req.pk, 'APPROVED')
        self.assertEqual(result, {'message': approval_engine.MSG_GROUP_REJECTION, 'status': 'REJECTED'})

    def test_no_lab_request_never_visits_lab_incharge(self):
        c = self.campus
        req = self._create(student_ids=[c.s1.pk, c.s2.pk])
        for user in (c.tutor1.user, c.tutor2.user, c.hod_cse.user, c.hod_ece.user):
            process_approval_step(user, req.pk, 'APPROVED')

        roles = set(od_models.ApprovalStep.objects.filter(approval__request=req).values_list('role', flat=True))
        self.assertEqual(roles, {'TUTOR', 'HOD'})

    def test_resolver_failure_leaves_step_pending(self):
        c = self.campus
        req = self._create()
        TeacherDesignation.objects.filter(teacher=c.hod_cse).delete()

        with self.assertRaises(NoHodForDepartment) as ctx:
            process_approval_step(c.tutor1.user, req.pk, 'APPROVED')

        self.assertEqual(ctx.exception.context['department_id'], c.cse.pk)
        approval, steps = self._steps(req, c.g1)
        self.assertEqual(approval.current_step_index, 0)
        self.assertEqual(len(steps), 1)
        self.assertEqual(steps[0].status, 'PENDING')
        self.assertIsNone(steps[0].approved_at)

    def test_hod_change_between_steps_is_honoured(self):
        c = self.campus
        req = self._create()
        new_hod = make_teacher('new_hod', c.cse)
        assign_hod(new_hod)

        process_approval_step(c.tutor1.user, req.pk, 'APPROVED')

        _, steps = self._steps(req, c.g1)
        self.assertEqual(steps[1].user, new_hod.user)
        with self.assertRaises(NoPendingStepForUser):
            process_approval_step(c.hod_cse.user, req.pk, 'APPROVED')
