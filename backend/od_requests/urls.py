from django.urls import path

from od_requests.views.inbox_views import ApproverInboxView
from od_requests.views.request_views import (
    AllRequestsView,
    CreateRequestView,
    GroupRequestsView,
    MyRequestsView,
    ProcessRequestView,
    ProofUploadView,
    RequestDetailView,
)

urlpatterns = [
    path('', CreateRequestView.as_view(), name='requests-create'),
    path('pending/', ApproverInboxView.as_view(), name='requests-pending'),
    path('mine/', MyRequestsView.as_view(), name='requests-mine'),
    path('groups/', GroupRequestsView.as_view(), name='requests-groups'),
    path('all/', AllRequestsView.as_view(), name='requests-all'),
    path('<int:id>/', RequestDetailView.as_view(), name='requests-detail'),
    path('<int:id>/process/', ProcessRequestView.as_view(), name='requests-process'),
    path('<int:id>/proof/', ProofUploadView.as_view(), name='requests-proof'),
]
