from rest_framework import serializers

from od_requests.serializers.approval import ApprovalStepSerializer
from od_requests.serializers.request import PendingRequestSerializer


class PendingApprovalSerializer(serializers.Serializer):
    """One approver inbox item: the open step, its request and prior steps."""
    step_id = serializers.IntegerField(source='step.id')
    sequence = serializers.IntegerField(source='step.sequence')
    role = serializers.CharField(source='step.role')
    group = serializers.SerializerMethodField()
    request = PendingRequestSerializer()
    history = ApprovalStepSerializer(many=True)

    def get_group(self, obj):
        return {'id': obj.group.id, 'name': obj.group.name}
