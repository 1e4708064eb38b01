from django.test import TestCase
from rest_framework.test import APIClient

from academics.services.designations import assign_hod
from od_requests.tests.utils import Campus


class TokenApiTests(TestCase):
    def setUp(self):
        self.campus = Campus()
        self.client = APIClient()

    def _login(self, identifier, password='pass1234'):
        return self.client.post('/api/accounts/token/', {'identifier': identifier, 'password': password}, format='json')

    def test_login_with_reg_no(self):
        resp = self._login('s1')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['role'], 'STUDENT')
        self.assertIn('access', resp.data)
        self.assertIn('refresh', resp.data)

    def test_login_with_staff_id_and_email(self):
        user = self.campus.tutor1.user
        user.email = 'tutor1@college.edu'
        user.save(update_fields=['email'])

        self.assertEqual(self._login('TUTOR1').data['role'], 'TEACHER')
        self.assertEqual(self._login('tutor1@college.edu').status_code, 200)

    def test_wrong_password(self):
        resp = self._login('s1', password='nope')
        self.assertEqual(resp.status_code, 400)

    def test_refresh(self):
        refresh = self._login('s1').data['refresh']
        resp = self.client.post('/api/accounts/token/refresh/', {'refresh': refresh}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertIn('access', resp.data)

    def test_bearer_token_authenticates(self):
        access = self._login('s1').data['access']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
        resp = self.client.get('/api/accounts/me/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['username'], 's1')


class MeApiTests(TestCase):
    def setUp(self):
        self.campus = Campus()
        self.client = APIClient()

    def test_student_profile(self):
        c = self.campus
        self.client.force_authenticate(c.s2.user)
        resp = self.client.get('/api/accounts/me/')
        profile = resp.data['profile']
        self.assertEqual(profile['reg_no'], 'S2')
        self.assertEqual(profile['od_count'], 0)
        self.assertEqual(profile['group']['name'], 'III ECE A')
        self.assertEqual(profile['department']['code'], 'ECE')

    def test_teacher_profile_lists_designations(self):
        c = self.campus
        assign_hod(c.hod_cse)
        self.client.force_authenticate(c.hod_cse.user)
        resp = self.client.get('/api/accounts/me/')
        self.assertEqual(resp.data['role'], 'TEACHER')
        self.assertEqual(resp.data['profile']['designations'], ['HOD'])

    def test_requires_authentication(self):
        self.assertEqual(self.client.get('/api/accounts/me/').status_code, 401)
