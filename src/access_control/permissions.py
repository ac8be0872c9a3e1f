"""DRF permission class applying the post visibility policy."""

from rest_framework import permissions

from .policy import Decision, can_mutate, can_view, requester_id_for


class PostAccessPermission(permissions.BasePermission):
    """Reads are open, writes need a verified identity; objects go through the policy.

    Object-level checks only run for views that call ``get_object``; the
    post lifecycle service applies the same policy itself, so both paths
    agree.
    """

    message = "You do not have permission to perform this action on this resource."

    def has_permission(self, request, view) -> bool:
        if request.method in permissions.SAFE_METHODS:
            return True
        return requester_id_for(getattr(request, "user", None)) is not None

    def has_object_permission(self, request, view, obj) -> bool:
        requester_id = requester_id_for(getattr(request, "user", None))
        if request.method in permissions.SAFE_METHODS:
            return can_view(requester_id, obj) is Decision.ALLOW
        return can_mutate(requester_id, obj) is Decision.ALLOW


__all__ = ["PostAccessPermission"]
