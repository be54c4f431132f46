from django.contrib import admin, messages

from .models import ContestResult, Student, Submission, SyncSettings
from .services.sync import SyncConfig, sync_all_students

admin.site.site_header = "Codeforces Tracker Administration"
admin.site.site_title = "Codeforces Tracker Admin"
admin.site.index_title = "Tracker administration"


class ContestResultInline(admin.TabularInline):
    model = ContestResult
    extra = 0
    can_delete = False
    fields = ('position', 'contest_id', 'contest_name', 'rank', 'old_rating', 'new_rating')
    readonly_fields = fields
    ordering = ('position',)


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = (
        'name',
        'codeforces_handle',
        'email',
        'current_rating',
        'max_rating',
        'is_active',
        'last_updated',
    )
    list_filter = ('is_active', 'email_reminders_enabled')
    search_fields = ('name', 'email', 'codeforces_handle')
    readonly_fields = ('current_rating', 'max_rating', 'last_updated', 'snapshot_synced_at', 'created_at', 'updated_at')
    inlines = [ContestResultInline]
    actions = ['sync_selected']

    @admin.action(description="Sync selected students with Codeforces")
    def sync_selected(self, request, queryset):
        report = sync_all_students(SyncConfig.load(), queryset=queryset)
        level = messages.WARNING if report.failed else messages.SUCCESS
        self.message_user(
            request,
            f"{len(report.updated)} updated, {len(report.failed)} failed.",
            level=level,
        )


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ('student', 'problem_contest_id', 'problem_index', 'problem_name', 'verdict', 'creation_time_seconds')
    list_filter = ('verdict',)
    search_fields = ('student__codeforces_handle', 'problem_name')
    list_select_related = ('student',)


@admin.register(SyncSettings)
class SyncSettingsAdmin(admin.ModelAdmin):
    list_display = ('cron_frequency', 'cron_time', 'email_enabled', 'inactivity_days', 'updated_at')

    def has_add_permission(self, request):
        return not SyncSettings.objects.exists()
