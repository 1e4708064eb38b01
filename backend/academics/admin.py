from django import forms
from django.contrib import admin, messages
from django.core.exceptions import ValidationError

from .models import (
    Department,
    TeacherProfile,
    Group,
    StudentProfile,
    Lab,
    Designation,
    TeacherDesignation,
    GroupApprover,
)
from .services.designations import assign_designation


class StudentProfileForm(forms.ModelForm):
    class Meta:
        model = StudentProfile
        fields = '__all__'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance and self.instance.pk and 'reg_no' in self.fields:
            # disable reg_no editing for existing records in admin
            self.fields['reg_no'].disabled = True

    def clean_reg_no(self):
        val = self.cleaned_data.get('reg_no')
        if self.instance and self.instance.pk and val != self.instance.reg_no:
            raise ValidationError('Student reg_no is immutable and cannot be changed.')
        return val


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ('code', 'name', 'short_name', 'current_hod')
    search_fields = ('code', 'name', 'short_name')

    def current_hod(self, obj):
        td = (
            TeacherDesignation.objects
            .filter(designation__role='HOD', teacher__department=obj)
            .select_related('teacher__user')
            .first()
        )
        return td.teacher.user.username if td else '-'
    current_hod.short_description = 'HOD'


@admin.register(TeacherProfile)
class TeacherProfileAdmin(admin.ModelAdmin):
    list_display = ('staff_id', 'user', 'department')
    list_filter = ('department',)
    search_fields = ('staff_id', 'user__username', 'user__email')
    raw_id_fields = ('user',)


class GroupApproverInline(admin.TabularInline):
    model = GroupApprover
    extra = 0
    fields = ('role', 'teacher')


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ('name', 'department', 'student_count')
    list_filter = ('department',)
    search_fields = ('name',)
    inlines = (GroupApproverInline,)

    def student_count(self, obj):
        return obj.students.count()
    student_count.short_description = 'Students'


@admin.register(StudentProfile)
class StudentProfileAdmin(admin.ModelAdmin):
    form = StudentProfileForm
    list_display = ('reg_no', 'user', 'group', 'od_count')
    list_filter = ('group__department', 'group')
    search_fields = ('reg_no', 'user__username', 'user__email')
    raw_id_fields = ('user',)
    actions = ('reset_od_count',)

    def reset_od_count(self, request, queryset):
        updated = queryset.update(od_count=0)
        self.message_user(request, f'Reset OD count for {updated} student(s).', level=messages.SUCCESS)
    reset_od_count.short_description = 'Reset OD count to 0'


@admin.register(Lab)
class LabAdmin(admin.ModelAdmin):
    list_display = ('name', 'department', 'incharge')
    list_filter = ('department',)
    search_fields = ('name',)


@admin.register(Designation)
class DesignationAdmin(admin.ModelAdmin):
    list_display = ('role', 'description')


@admin.register(TeacherDesignation)
class TeacherDesignationAdmin(admin.ModelAdmin):
    list_display = ('teacher', 'designation', 'assigned_at')
    list_filter = ('designation', 'teacher__department')
    search_fields = ('teacher__staff_id', 'teacher__user__username')

    def save_model(self, request, obj, form, change):
        # Route through the designation service so HOD replacement is applied.
        if change:
            TeacherDesignation.objects.filter(pk=obj.pk).delete()
        assigned = assign_designation(obj.teacher, obj.designation)
        obj.pk = assigned.pk
        obj.assigned_at = assigned.assigned_at


@admin.register(GroupApprover)
class GroupApproverAdmin(admin.ModelAdmin):
    list_display = ('group', 'role', 'teacher')
    list_filter = ('role', 'group__department')
    search_fields = ('group__name', 'teacher__staff_id', 'teacher__user__username')
