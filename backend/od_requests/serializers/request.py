from rest_framework import serializers

from od_requests import models as od_models
from od_requests.serializers.approval import ApprovalSerializer, user_summary


class RequestCreateSerializer(serializers.Serializer):
    """Shape of the create payload; domain rules are checked by the initiator."""
    type = serializers.ChoiceField(choices=od_models.Request.RequestType.choices)
    category = serializers.ChoiceField(
        choices=od_models.Request.ODCategory.choices, required=False, allow_null=True, allow_blank=True
    )
    needs_lab = serializers.BooleanField(required=False, default=False)
    reason = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    lab_id = serializers.IntegerField(required=False, allow_null=True)
    student_ids = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)


class StudentSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    reg_no = serializers.CharField()
    name = serializers.SerializerMethodField()
    group = serializers.SerializerMethodField()

    def get_name(self, obj):
        return obj.user.get_full_name() or obj.user.username

    def get_group(self, obj):
        return {'id': obj.group_id, 'name': obj.group.name}


class RequestListSerializer(serializers.ModelSerializer):
    requested_by = serializers.SerializerMethodField()
    students = StudentSummarySerializer(many=True, read_only=True)
    lab = serializers.SerializerMethodField()

    class Meta:
        model = od_models.Request
        fields = (
            'id', 'type', 'category', 'needs_lab', 'reason', 'start_date', 'end_date',
            'status', 'lab', 'requested_by', 'students', 'created_at',
        )
        read_only_fields = fields

    def get_requested_by(self, obj):
        return user_summary(obj.requested_by)

    def get_lab(self, obj):
        if obj.lab is None:
            return None
        return {'id': obj.lab_id, 'name': obj.lab.name}


class RequestDetailSerializer(RequestListSerializer):
    flow_template = serializers.CharField(source='flow_template.name', read_only=True)
    approvals = ApprovalSerializer(many=True, read_only=True)

    class Meta(RequestListSerializer.Meta):
        fields = RequestListSerializer.Meta.fields + (
            'description', 'proof_of_od', 'flow_template', 'approvals', 'updated_at',
        )
        read_only_fields = fields


class PendingRequestSerializer(RequestListSerializer):
    """Request detail for an approver inbox item, without other groups' approvals."""
    flow_template = serializers.CharField(source='flow_template.name', read_only=True)

    class Meta(RequestListSerializer.Meta):
        fields = RequestListSerializer.Meta.fields + ('description', 'proof_of_od', 'flow_template')
        read_only_fields = fields


class ProofUploadSerializer(serializers.ModelSerializer):
    proof_of_od = serializers.FileField()

    class Meta:
        model = od_models.Request
        fields = ('proof_of_od',)
