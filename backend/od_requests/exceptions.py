"""Typed failures raised by the OD workflow services.

Every error carries an HTTP `status_code` and a `context` dict with the
identifiers a caller needs to show an actionable message. Views translate
them with `WorkflowError.as_response_data()`.
"""
from typing import Iterable, Optional


class WorkflowError(Exception):
    status_code = 400
    default_message = 'OD workflow error'

    def __init__(self, message: Optional[str] = None, **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def as_response_data(self):
        data = {'detail': self.message}
        data.update(self.context)
        return data


# Input validation

class RequestValidationError(WorkflowError):
    default_message = 'Invalid OD request'


class InvalidDateRange(RequestValidationError):
    default_message = 'End date must be after or equal to start date'


class LabRequired(RequestValidationError):
    default_message = 'Lab ID is required when lab is needed'


class LabNotFound(RequestValidationError):
    default_message = 'Lab not found'

    def __init__(self, lab_id):
        super().__init__(lab_id=lab_id)


class NoStudents(RequestValidationError):
    default_message = 'At least one student must be included in the request'


class UnknownStudents(RequestValidationError):
    default_message = 'One or more students not found'

    def __init__(self, student_ids: Iterable):
        super().__init__(student_ids=sorted(student_ids))


class InvalidSubmitter(RequestValidationError):
    default_message = 'Requests can only be submitted by a student'


class OdLimitExceeded(RequestValidationError):
    default_message = 'OD limit exceeded'

    def __init__(self, students: Iterable[str], limit: int):
        students = sorted(students)
        super().__init__(
            f"OD limit of {limit} reached for: {', '.join(students)}",
            students=students,
            limit=limit,
        )


class InvalidDecision(RequestValidationError):
    default_message = 'status must be "APPROVED" or "REJECTED"'


# Resolution failures

class ResolutionError(WorkflowError):
    default_message = 'Could not resolve approver'


class FlowTemplateNotFound(ResolutionError):
    def __init__(self, name: str):
        super().__init__(f'Flow template not found: {name}', flow_template=name)


class LabInchargeMissing(ResolutionError):
    def __init__(self, lab_id):
        super().__init__(f'Lab {lab_id} has no incharge', lab_id=lab_id)


class ApproverNotFound(ResolutionError):
    def __init__(self, group_id, role: str):
        super().__init__(f'No approver found for role {role} in group {group_id}', group_id=group_id, role=role)


class NoHodForDepartment(ResolutionError):
    def __init__(self, department_id):
        super().__init__(f'No HOD assigned for department {department_id}', department_id=department_id, role='HOD')


# State violations (expected under concurrency, not bugs)

class StateViolation(WorkflowError):
    status_code = 409


class NoPendingStepForUser(StateViolation):
    def __init__(self, user_id, request_id):
        super().__init__(
            'No pending step found for this user on this request',
            user_id=user_id,
            request_id=request_id,
        )


# Access

class AccessError(WorkflowError):
    status_code = 403


class NotAStudent(AccessError):
    default_message = 'User is not a student'


class NotATeacher(AccessError):
    default_message = 'User is not a teacher'
