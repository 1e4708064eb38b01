from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsTeacher
from od_requests.serializers import PendingApprovalSerializer
from od_requests.services import inbox_service


class ApproverInboxView(APIView):
    permission_classes = (IsTeacher,)

    def get(self, request, *args, **kwargs):
        items = inbox_service.requests_pending_for(request.user)
        serializer = PendingApprovalSerializer(items, many=True)
        return Response(serializer.data)
