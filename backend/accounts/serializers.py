from typing import Optional

from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.tokens import RefreshToken

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='display_name', read_only=True)

    class Meta:
        model = User
        fields = ('id', 'username', 'name', 'email', 'role')


class MeSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    name = serializers.CharField(source='display_name', read_only=True)
    role = serializers.CharField(read_only=True)
    profile = serializers.SerializerMethodField()

    def get_profile(self, obj):
        # Minimal profile payload to avoid touching academic serializers
        sp = getattr(obj, 'student_profile', None)
        if sp is not None:
            group = sp.group
            return {
                'reg_no': sp.reg_no,
                'od_count': sp.od_count,
                'group': {'id': group.id, 'name': group.name} if group else None,
                'department': {
                    'id': group.department.id,
                    'code': group.department.code,
                    'name': group.department.name,
                } if group else None,
            }
        tp = getattr(obj, 'teacher_profile', None)
        if tp is not None:
            dept = tp.department
            return {
                'staff_id': tp.staff_id,
                'department': {
                    'id': getattr(dept, 'id', None),
                    'code': getattr(dept, 'code', None),
                    'name': getattr(dept, 'name', None),
                } if dept else None,
                'designations': list(tp.designations.values_list('designation__role', flat=True)),
            }
        return None


class IdentifierTokenObtainPairSerializer(serializers.Serializer):
    """Authenticate using `identifier` + `password` and return JWT pair.

    `identifier` may be an email (contains '@'), a username, or an academic
    identifier (student `reg_no` or teacher `staff_id`).
    """
    identifier = serializers.CharField(write_only=True)
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        identifier = attrs.get('identifier')
        password = attrs.get('password')

        if not identifier or not password:
            raise serializers.ValidationError('Must include "identifier" and "password".')

        user: Optional[User] = None

        if '@' in identifier:
            user = User.objects.filter(email__iexact=identifier).first()

        if user is None:
            user = User.objects.filter(username__iexact=identifier).first()

        if user is None:
            from academics.models import StudentProfile, TeacherProfile

            sp = StudentProfile.objects.filter(reg_no__iexact=identifier).select_related('user').first()
            if sp:
                user = sp.user
            else:
                tp = TeacherProfile.objects.filter(staff_id__iexact=identifier).select_related('user').first()
                if tp:
                    user = tp.user

        # generic error message to avoid leaking which part failed
        invalid_msg = 'Unable to log in with provided credentials.'

        if user is None or not user.check_password(password):
            raise serializers.ValidationError(invalid_msg)

        if not getattr(user, 'is_active', True):
            raise serializers.ValidationError('User account is disabled.')

        refresh = RefreshToken.for_user(user)
        refresh['role'] = user.role

        return {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
            'role': user.role,
        }
