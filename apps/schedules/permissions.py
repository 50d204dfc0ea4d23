from rest_framework import permissions


class IsEventOrganizer(permissions.BasePermission):
    """
    Permission: User must have created the schedule event.
    """

    message = "Only the organizer can manage this event"

    def has_object_permission(self, request, view, obj):
        # obj is a ScheduleEvent instance
        return obj.created_by_id == request.user.id
