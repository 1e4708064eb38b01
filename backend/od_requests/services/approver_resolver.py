"""Resolve the concrete User who should act on an approval step.

Maps a semantic role to a teacher via `academics.services.authority_resolver`
and returns that teacher's user. Read-only; resolution failures propagate as
the resolver's typed errors so the enclosing transaction rolls back.
"""
from academics.services import authority_resolver


def resolve_approver(group, role: str, request):
    """Return the `User` who approves `role` for `group` on `request`."""
    teacher = authority_resolver.resolve_approver(group, role, request)
    return teacher.user
