from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import User
from academics.models import StudentProfile, TeacherProfile


class StudentProfileInline(admin.StackedInline):
    model = StudentProfile
    can_delete = False
    verbose_name = 'Student profile'
    verbose_name_plural = 'Student profile'
    fields = ('reg_no', 'group', 'od_count')

    def get_readonly_fields(self, request, obj=None):
        # make reg_no readonly when editing an existing user's student profile
        if obj and getattr(obj, 'student_profile', None) is not None:
            return ('reg_no',)
        return ()


class TeacherProfileInline(admin.StackedInline):
    model = TeacherProfile
    can_delete = False
    verbose_name = 'Teacher profile'
    verbose_name_plural = 'Teacher profile'

    def get_readonly_fields(self, request, obj=None):
        if obj and getattr(obj, 'teacher_profile', None) is not None:
            return ('staff_id',)
        return ()


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = ('username', 'email', 'role', 'mobile_no', 'is_staff', 'get_profile')
    list_filter = DjangoUserAdmin.list_filter + ('role',)
    inlines = (StudentProfileInline, TeacherProfileInline)

    fieldsets = DjangoUserAdmin.fieldsets + (
        ('OD portal', {'fields': ('role', 'mobile_no')}),
    )
    add_fieldsets = DjangoUserAdmin.add_fieldsets + (
        ('OD portal', {'fields': ('role', 'email')}),
    )

    def get_profile(self, obj):
        sp = getattr(obj, 'student_profile', None)
        if sp is not None:
            return f"Student {sp.reg_no}"
        tp = getattr(obj, 'teacher_profile', None)
        if tp is not None:
            return f"Teacher {tp.staff_id}"
        return '-'
    get_profile.short_description = 'Profile'
