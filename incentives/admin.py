from django.contrib import admin
from .models import IncentiveAward, IncentiveBalance


@admin.register(IncentiveBalance)
class IncentiveBalanceAdmin(admin.ModelAdmin):
    list_display = ('participant', 'points', 'updated_at')
    search_fields = ('participant__username', 'participant__email', 'participant__student_profile__roll_number')
    ordering = ('-points', 'participant')
    readonly_fields = ('participant', 'points', 'updated_at')

    def has_add_permission(self, request):
        return False


@admin.register(IncentiveAward)
class IncentiveAwardAdmin(admin.ModelAdmin):
    list_display = ('participant', 'amount', 'reason', 'participation', 'created_at')
    list_filter = ('reason',)
    search_fields = ('participant__username', 'participant__email')
    readonly_fields = ('participant', 'participation', 'amount', 'reason', 'created_at')

    def has_add_permission(self, request):
        return False
