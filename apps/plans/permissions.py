from rest_framework import permissions


class IsPlanOwner(permissions.BasePermission):
    """
    Permission: User must own the plan.
    """

    message = "Only the plan owner can do this"

    def has_object_permission(self, request, view, obj):
        # obj is a Plan instance
        return obj.owner_id == request.user.id
