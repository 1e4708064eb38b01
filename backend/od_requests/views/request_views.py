from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole, IsStudent, IsTeacher
from od_requests import models as od_models
from od_requests.exceptions import WorkflowError
from od_requests.serializers import (
    ProcessDecisionSerializer,
    ProofUploadSerializer,
    RequestCreateSerializer,
    RequestDetailSerializer,
    RequestListSerializer,
)
from od_requests.services import access_control, approval_engine, inbox_service, request_initiator
from od_requests.views.errors import workflow_error_response


class CreateRequestView(APIView):
    permission_classes = (IsStudent,)

    def post(self, request, *args, **kwargs):
        serializer = RequestCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            created = request_initiator.create_request(
                type=data['type'],
                category=data.get('category'),
                needs_lab=data.get('needs_lab', False),
                reason=data['reason'],
                description=data.get('description'),
                start_date=data['start_date'],
                end_date=data['end_date'],
                lab_id=data.get('lab_id'),
                submitter=request.user,
                student_ids=data.get('student_ids', []),
            )
        except WorkflowError as exc:
            return workflow_error_response(exc)

        return Response(RequestDetailSerializer(created).data, status=status.HTTP_201_CREATED)


class ProcessRequestView(APIView):
    permission_classes = (IsTeacher,)

    def post(self, request, id: int, *args, **kwargs):
        serializer = ProcessDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            result = approval_engine.process_approval_step(
                request.user,
                id,
                serializer.validated_data['status'],
                comments=serializer.validated_data.get('comments'),
            )
        except WorkflowError as exc:
            return workflow_error_response(exc)

        return Response(result)


class MyRequestsView(APIView):
    permission_classes = (IsStudent,)

    def get(self, request, *args, **kwargs):
        try:
            qs = inbox_service.requests_for_student(request.user)
        except WorkflowError as exc:
            return workflow_error_response(exc)
        return Response(RequestDetailSerializer(qs, many=True).data)


class GroupRequestsView(APIView):
    permission_classes = (IsTeacher,)

    def get(self, request, *args, **kwargs):
        try:
            qs = inbox_service.requests_for_affiliated_groups(request.user)
        except WorkflowError as exc:
            return workflow_error_response(exc)
        return Response(RequestDetailSerializer(qs, many=True).data)


class AllRequestsView(APIView):
    permission_classes = (IsAdminRole,)

    def get(self, request, *args, **kwargs):
        qs = inbox_service.all_requests()
        status_filter = request.query_params.get('status')
        if status_filter:
            qs = qs.filter(status=status_filter.upper())
        return Response(RequestListSerializer(qs, many=True).data)


class RequestDetailView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, id: int, *args, **kwargs):
        od_request = get_object_or_404(od_models.Request, pk=id)

        if not access_control.can_user_view_request(od_request, request.user):
            return Response({'detail': 'Not authorized to view this request'}, status=status.HTTP_403_FORBIDDEN)

        return Response(RequestDetailSerializer(inbox_service.get_request(id)).data)


class ProofUploadView(APIView):
    permission_classes = (IsAuthenticated,)
    parser_classes = (MultiPartParser, FormParser)

    def post(self, request, id: int, *args, **kwargs):
        od_request = get_object_or_404(od_models.Request, pk=id)

        if not access_control.can_user_upload_proof(od_request, request.user):
            return Response({'detail': 'Only the submitter can upload proof'}, status=status.HTTP_403_FORBIDDEN)

        serializer = ProofUploadSerializer(od_request, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(RequestDetailSerializer(inbox_service.get_request(id)).data)
