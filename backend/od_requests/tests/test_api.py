from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from academics.models import StudentProfile
from od_requests import models as od_models
from od_requests.services.request_initiator import create_request
from od_requests.tests.utils import Campus, make_user, request_kwargs


class RequestApiTests(TestCase):
    def setUp(self):
        self.campus = Campus()
        self.client = APIClient()

    def _payload(self, **overrides):
        c = self.campus
        payload = {
            'type': 'OD',
            'category': 'SEMINAR',
            'needs_lab': False,
            'reason': 'Workshop',
            'start_date': '2026-03-02',
            'end_date': '2026-03-04',
            'student_ids': [c.s1.pk, c.s2.pk],
        }
        payload.update(overrides)
        return payload

    def test_student_creates_request(self):
        c = self.campus
        self.client.force_authenticate(c.s1.user)

        resp = self.client.post('/api/requests/', self._payload(), format='json')

        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['status'], 'PENDING')
        self.assertEqual(resp.data['flow_template'], 'NoLabFlow')
        self.assertEqual(len(resp.data['approvals']), 2)
        self.assertEqual(resp.data['approvals'][0]['steps'][0]['role'], 'TUTOR')

    def test_create_validation_error_carries_context(self):
        c = self.campus
        StudentProfile.objects.filter(pk=c.s2.pk).update(od_count=10)
        self.client.force_authenticate(c.s1.user)

        resp = self.client.post('/api/requests/', self._payload(), format='json')

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['students'], ['S2'])
        self.assertIn('detail', resp.data)

    def test_create_bad_dates(self):
        self.client.force_authenticate(self.campus.s1.user)
        resp = self.client.post('/api/requests/', self._payload(end_date='2026-03-01'), format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['detail'], 'End date must be after or equal to start date')

    def test_teacher_cannot_create(self):
        self.client.force_authenticate(self.campus.tutor1.user)
        resp = self.client.post('/api/requests/', self._payload(), format='json')
        self.assertEqual(resp.status_code, 403)

    def test_unauthenticated_is_rejected(self):
        resp = self.client.get('/api/requests/mine/')
        self.assertEqual(resp.status_code, 401)

    def test_process_flow_over_http(self):
        c = self.campus
        req = create_request(**request_kwargs(c))

        self.client.force_authenticate(c.tutor1.user)
        resp = self.client.post(f'/api/requests/{req.pk}/process/', {'status': 'APPROVED', 'comments': 'fine'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data, {'message': 'Step approved, moved to next approver', 'status': 'PENDING'})

        resp = self.client.post(f'/api/requests/{req.pk}/process/', {'status': 'APPROVED'}, format='json')
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.data['request_id'], req.pk)

        self.client.force_authenticate(c.hod_cse.user)
        resp = self.client.post(f'/api/requests/{req.pk}/process/', {'status': 'approved'}, format='json')
        self.assertEqual(resp.data, {'message': 'Request fully approved', 'status': 'APPROVED'})

    def test_process_invalid_decision(self):
        c = self.campus
        req = create_request(**request_kwargs(c))
        self.client.force_authenticate(c.tutor1.user)
        resp = self.client.post(f'/api/requests/{req.pk}/process/', {'status': 'LATER'}, format='json')
        self.assertEqual(resp.status_code, 400)

    def test_pending_inbox(self):
        c = self.campus
        req = create_request(**request_kwargs(c, student_ids=[c.s1.pk, c.s2.pk], description='Need to attend IEEE conf'))
        self.client.force_authenticate(c.tutor1.user)

        resp = self.client.get('/api/requests/pending/')

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data), 1)
        self.assertEqual(resp.data[0]['request']['id'], req.pk)
        self.assertEqual(resp.data[0]['role'], 'TUTOR')
        self.assertEqual(resp.data[0]['history'], [])
        request_data = resp.data[0]['request']
        self.assertEqual(request_data['description'], 'Need to attend IEEE conf')
        self.assertIn('proof_of_od', request_data)
        self.assertIsNone(request_data['proof_of_od'])
        self.assertEqual(request_data['flow_template'], 'NoLabFlow')
        # Only this approval's history is exposed, never other groups' approvals.
        self.assertNotIn('approvals', request_data)

    def test_mine_and_groups(self):
        c = self.campus
        req = create_request(**request_kwargs(c, student_ids=[c.s1.pk, c.s2.pk]))

        self.client.force_authenticate(c.s2.user)
        resp = self.client.get('/api/requests/mine/')
        self.assertEqual([r['id'] for r in resp.data], [req.pk])

        self.client.force_authenticate(c.hod_ece.user)
        resp = self.client.get('/api/requests/groups/')
        self.assertEqual([r['id'] for r in resp.data], [req.pk])

    def test_all_requests_is_admin_only(self):
        c = self.campus
        create_request(**request_kwargs(c))

        self.client.force_authenticate(c.tutor1.user)
        self.assertEqual(self.client.get('/api/requests/all/').status_code, 403)

        self.client.force_authenticate(make_user('office', role='ADMIN'))
        resp = self.client.get('/api/requests/all/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data), 1)
        resp = self.client.get('/api/requests/all/', {'status': 'approved'})
        self.assertEqual(resp.data, [])

    def test_detail_visibility(self):
        c = self.campus
        req = create_request(**request_kwargs(c))

        self.client.force_authenticate(c.tutor1.user)
        resp = self.client.get(f'/api/requests/{req.pk}/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['students'][0]['reg_no'], 'S1')

        self.client.force_authenticate(c.s2.user)
        self.assertEqual(self.client.get(f'/api/requests/{req.pk}/').status_code, 403)
        self.assertEqual(self.client.get('/api/requests/9999/').status_code, 404)

    @override_settings(MEDIA_ROOT='/tmp/odportal-test-media')
    def test_proof_upload_by_submitter(self):
        c = self.campus
        req = create_request(**request_kwargs(c))
        upload = SimpleUploadedFile('certificate.pdf', b'%PDF-1.4 proof', content_type='application/pdf')

        self.client.force_authenticate(c.s1.user)
        resp = self.client.post(f'/api/requests/{req.pk}/proof/', {'proof_of_od': upload}, format='multipart')

        self.assertEqual(resp.status_code, 200)
        self.assertTrue(od_models.Request.objects.get(pk=req.pk).proof_of_od.name.endswith('.pdf'))

    def test_proof_upload_by_other_user_is_forbidden(self):
        c = self.campus
        req = create_request(**request_kwargs(c))
        upload = SimpleUploadedFile('certificate.pdf', b'%PDF-1.4 proof', content_type='application/pdf')

        self.client.force_authenticate(c.s3.user)
        resp = self.client.post(f'/api/requests/{req.pk}/proof/', {'proof_of_od': upload}, format='multipart')
        self.assertEqual(resp.status_code, 403)
