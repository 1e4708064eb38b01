from rest_framework.response import Response
from rest_framework.views import exception_handler

from od_requests.exceptions import WorkflowError


def custom_exception_handler(exc, context):
    if isinstance(exc, WorkflowError):
        data = exc.as_response_data()
        data['status_code'] = exc.status_code
        return Response(data, status=exc.status_code)

    response = exception_handler(exc, context)

    if response is not None and isinstance(response.data, dict):
        response.data['status_code'] = response.status_code

    return response
