from od_requests import models as od_models


def can_user_view_request(request: od_models.Request, user) -> bool:
    """Return True if `user` may view `request`.

    Rules (True if any):
    - user is superuser or has the ADMIN role
    - user submitted the request
    - user is one of the participating students
    - user holds or held an approval step on the request
    """
    if user is None or not getattr(user, 'is_authenticated', False):
        return False

    if user.is_superuser or getattr(user, 'is_admin_role', False):
        return True

    if request.requested_by_id == user.pk:
        return True

    if od_models.RequestStudent.objects.filter(request=request, student__user=user).exists():
        return True

    return od_models.ApprovalStep.objects.filter(approval__request=request, user=user).exists()


def can_user_upload_proof(request: od_models.Request, user) -> bool:
    if user is None or not getattr(user, 'is_authenticated', False):
        return False
    return request.requested_by_id == user.pk
