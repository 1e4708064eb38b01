from rest_framework import serializers

from od_requests import models as od_models


def user_summary(user):
    if user is None:
        return None
    return {
        'id': user.id,
        'username': user.username,
        'name': user.get_full_name() or user.username,
        'email': user.email,
    }


class ApprovalStepSerializer(serializers.ModelSerializer):
    approver = serializers.SerializerMethodField()

    class Meta:
        model = od_models.ApprovalStep
        fields = ('id', 'sequence', 'role', 'status', 'comments', 'approved_at', 'approver')
        read_only_fields = fields

    def get_approver(self, obj):
        return user_summary(obj.user)


class ApprovalSerializer(serializers.ModelSerializer):
    group = serializers.SerializerMethodField()
    steps = ApprovalStepSerializer(many=True, read_only=True)

    class Meta:
        model = od_models.Approval
        fields = ('id', 'group', 'current_step_index', 'status', 'steps')
        read_only_fields = fields

    def get_group(self, obj):
        return {'id': obj.group_id, 'name': obj.group.name}


class ProcessDecisionSerializer(serializers.Serializer):
    # Decision is normalised and validated by the approval engine.
    status = serializers.CharField()
    comments = serializers.CharField(required=False, allow_blank=True, allow_null=True)
