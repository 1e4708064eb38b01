from django.contrib import admin
from . import models


class FlowStepInline(admin.TabularInline):
    model = models.FlowStep
    extra = 0
    fields = ('sequence', 'role')

    # Approvals address steps by position, so steps of a template in use are frozen.
    def _in_use(self, obj):
        return obj is not None and obj.requests.exists()

    def has_add_permission(self, request, obj=None):
        return not self._in_use(obj) and super().has_add_permission(request, obj)

    def has_change_permission(self, request, obj=None):
        return not self._in_use(obj) and super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        return not self._in_use(obj) and super().has_delete_permission(request, obj)


class FlowTemplateAdmin(admin.ModelAdmin):
    list_display = ('name', 'description', 'step_roles')
    search_fields = ('name',)
    inlines = (FlowStepInline,)

    def step_roles(self, obj):
        return ' > '.join(step.role for step in obj.ordered_steps())
    step_roles.short_description = 'Steps'


class RequestStudentInline(admin.TabularInline):
    model = models.RequestStudent
    extra = 0
    raw_id_fields = ('student',)


class ApprovalInline(admin.TabularInline):
    model = models.Approval
    extra = 0
    fields = ('group', 'current_step_index', 'status')
    readonly_fields = fields
    show_change_link = True


class RequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'type', 'category', 'requested_by', 'needs_lab', 'start_date', 'end_date', 'status', 'created_at')
    list_filter = ('type', 'status', 'needs_lab', 'category')
    search_fields = ('requested_by__username', 'requested_by__email', 'reason')
    inlines = (RequestStudentInline, ApprovalInline)
    date_hierarchy = 'created_at'
    # Status is derived from approvals and must only change through the approval engine.
    readonly_fields = ('status', 'flow_template', 'created_at', 'updated_at')


class ApprovalStepInline(admin.TabularInline):
    model = models.ApprovalStep
    extra = 0
    fields = ('sequence', 'role', 'user', 'status', 'comments', 'approved_at')
    readonly_fields = fields


class ApprovalAdmin(admin.ModelAdmin):
    list_display = ('request', 'group', 'current_step_index', 'status')
    list_filter = ('status', 'group__department')
    inlines = (ApprovalStepInline,)
    readonly_fields = ('request', 'group', 'current_step_index', 'status')


class ApprovalStepAdmin(admin.ModelAdmin):
    list_display = ('approval', 'sequence', 'role', 'user', 'status', 'approved_at')
    list_filter = ('status', 'role')
    search_fields = ('user__username', 'approval__request__id')


admin.site.register(models.FlowTemplate, FlowTemplateAdmin)
admin.site.register(models.Request, RequestAdmin)
admin.site.register(models.Approval, ApprovalAdmin)
admin.site.register(models.ApprovalStep, ApprovalStepAdmin)
