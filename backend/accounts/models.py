from django.db import models
from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator


class UsernameValidator(RegexValidator):
    """Custom validator that allows spaces in usernames."""
    regex = r'^[\w\s.@+-]+$'
    message = 'Enter a valid username. This value may contain letters, numbers, spaces, and @/./+/-/_ characters.'
    flags = 0


class User(AbstractUser):
    """
    Base user model.
    Students, teachers and admins are all users; `role` decides which
    side of the OD workflow they see.
    """
    class UserRole(models.TextChoices):
        STUDENT = 'STUDENT', 'Student'
        TEACHER = 'TEACHER', 'Teacher'
        ADMIN = 'ADMIN', 'Admin'

    username = models.CharField(
        max_length=150,
        unique=True,
        help_text='Required. 150 characters or fewer. Letters, numbers, spaces, and @/./+/-/_ characters.',
        validators=[UsernameValidator()],
        error_messages={
            'unique': 'A user with that username already exists.',
        },
    )

    role = models.CharField(max_length=16, choices=UserRole.choices, default=UserRole.STUDENT, db_index=True)

    mobile_no = models.CharField(
        'Mobile no',
        max_length=32,
        blank=True,
        default='',
        help_text='Optional mobile number (leave empty if unknown).',
    )

    def __str__(self):
        return self.username

    @property
    def display_name(self):
        return self.get_full_name() or self.username

    @property
    def is_student(self):
        return self.role == self.UserRole.STUDENT

    @property
    def is_teacher(self):
        return self.role == self.UserRole.TEACHER

    @property
    def is_admin_role(self):
        return self.role == self.UserRole.ADMIN or self.is_superuser
