from django.contrib import admin
from .models import Event, Participation


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ('name', 'niche', 'venue', 'date', 'time', 'capacity', 'is_active')
    list_filter = ('niche', 'is_active', 'date')
    search_fields = ('name', 'description', 'venue')
    date_hierarchy = 'date'


@admin.register(Participation)
class ParticipationAdmin(admin.ModelAdmin):
    """
    Read-only: status changes must go through the participation ledger.
    """
    list_display = ('participant', 'event', 'participant_role', 'selected_niche', 'status', 'updated_at')
    list_filter = ('status', 'participant_role', 'selected_niche')
    search_fields = ('participant__username', 'participant__email', 'event__name')
    readonly_fields = (
        'event', 'participant', 'participant_role', 'selected_niche', 'status', 'created_at', 'updated_at',
    )

    def has_add_permission(self, request):
        return False
