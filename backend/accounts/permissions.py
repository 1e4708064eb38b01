from rest_framework import permissions


class HasUserRole(permissions.BasePermission):
    """Allow access only to authenticated users whose `role` is in `allowed_roles`.

    Superusers always pass.
    """

    allowed_roles: tuple = ()
    message = 'You do not have the role required for this action.'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        if not user or not user.is_authenticated:
            return False
        if getattr(user, 'is_superuser', False):
            return True
        return getattr(user, 'role', None) in self.allowed_roles


class IsStudent(HasUserRole):
    allowed_roles = ('STUDENT',)
    message = 'Only students can perform this action.'


class IsTeacher(HasUserRole):
    allowed_roles = ('TEACHER',)
    message = 'Only teachers can perform this action.'


class IsAdminRole(HasUserRole):
    allowed_roles = ('ADMIN',)
    message = 'Only administrators can perform this action.'
