from .request import (
    RequestCreateSerializer,
    RequestListSerializer,
    RequestDetailSerializer,
    PendingRequestSerializer,
    ProofUploadSerializer,
)

from .approval import ApprovalSerializer, ApprovalStepSerializer, ProcessDecisionSerializer
from .inbox_serializers import PendingApprovalSerializer

__all__ = [
    'RequestCreateSerializer',
    'RequestListSerializer',
    'RequestDetailSerializer',
    'PendingRequestSerializer',
    'ProofUploadSerializer',
    'ApprovalSerializer',
    'ApprovalStepSerializer',
    'ProcessDecisionSerializer',
    'PendingApprovalSerializer',
]
