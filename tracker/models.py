from django.db import models
from django.utils import timezone


class Student(models.Model):
    name = models.CharField(max_length=200)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=50, blank=True, default='')
    codeforces_handle = models.CharField(max_length=100, unique=True)

    # Cached from Codeforces on every sync
    current_rating = models.IntegerField(default=0)
    max_rating = models.IntegerField(default=0)
    last_updated = models.DateTimeField(default=timezone.now)
    snapshot_synced_at = models.DateTimeField(null=True, blank=True)

    email_reminders_enabled = models.BooleanField(default=True)
    reminder_count = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']
        verbose_name = "Student"
        verbose_name_plural = "Students"

    def __str__(self):
        return f"{self.name} ({self.codeforces_handle})"


class ContestResult(models.Model):
    """One row of a student's Codeforces rating history (``user.rating``)."""

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='contests')
    position = models.PositiveIntegerField(default=0, help_text="Order returned by Codeforces")
    contest_id = models.IntegerField(null=True, blank=True)
    contest_name = models.CharField(max_length=300, blank=True, default='')
    handle = models.CharField(max_length=100, blank=True, default='')
    rank = models.IntegerField(null=True, blank=True)
    rating_update_time_seconds = models.BigIntegerField(null=True, blank=True)
    old_rating = models.IntegerField(null=True, blank=True)
    new_rating = models.IntegerField(null=True, blank=True)

    class Meta:
        ordering = ['student', 'position']
        indexes = [
            models.Index(fields=['student', 'position'], name='tracker_con_student_5c1e0a_idx'),
        ]
        verbose_name = "Contest Result"
        verbose_name_plural = "Contest Results"

    def __str__(self):
        return f"{self.handle} - {self.contest_name} #{self.rank}"


class Submission(models.Model):
    """One row of a student's Codeforces submission history (``user.status``)."""

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='submissions')
    position = models.PositiveIntegerField(default=0, help_text="Order returned by Codeforces")
    submission_id = models.BigIntegerField(null=True, blank=True)
    contest_id = models.IntegerField(null=True, blank=True)
    creation_time_seconds = models.BigIntegerField(null=True, blank=True)
    relative_time_seconds = models.BigIntegerField(null=True, blank=True)

    # Problem descriptor
    problem_contest_id = models.IntegerField(null=True, blank=True)
    problem_index = models.CharField(max_length=10, blank=True, default='')
    problem_name = models.CharField(max_length=300, blank=True, default='')
    problem_type = models.CharField(max_length=50, blank=True, default='')
    problem_rating = models.IntegerField(null=True, blank=True)
    problem_tags = models.JSONField(default=list, blank=True)

    # Party descriptor: contestId, members, participantType, ghost, startTimeSeconds
    author = models.JSONField(default=dict, blank=True)

    programming_language = models.CharField(max_length=100, blank=True, default='')
    verdict = models.CharField(max_length=50, blank=True, default='')
    testset = models.CharField(max_length=50, blank=True, default='')
    passed_test_count = models.IntegerField(null=True, blank=True)
    time_consumed_millis = models.IntegerField(null=True, blank=True)
    memory_consumed_bytes = models.BigIntegerField(null=True, blank=True)

    class Meta:
        ordering = ['student', 'position']
        indexes = [
            models.Index(fields=['student', 'position'], name='tracker_sub_student_8f2b7d_idx'),
            models.Index(fields=['creation_time_seconds'], name='tracker_sub_creatio_3a9e41_idx'),
        ]
        verbose_name = "Submission"
        verbose_name_plural = "Submissions"

    def __str__(self):
        return f"{self.student_id} - {self.problem_contest_id}{self.problem_index} ({self.verdict})"


class SyncSettings(models.Model):
    FREQUENCY_DAILY = 'daily'
    FREQUENCY_TWICE_DAILY = 'twice-daily'
    FREQUENCY_WEEKLY = 'weekly'
    FREQUENCY_CHOICES = [
        (FREQUENCY_DAILY, 'Daily'),
        (FREQUENCY_TWICE_DAILY, 'Twice daily'),
        (FREQUENCY_WEEKLY, 'Weekly'),
    ]

    cron_time = models.CharField(max_length=5, default='02:00', help_text="HH:MM")
    cron_frequency = models.CharField(max_length=20, choices=FREQUENCY_CHOICES, default=FREQUENCY_DAILY)
    email_enabled = models.BooleanField(default=True)
    inactivity_days = models.PositiveIntegerField(default=7)

    smtp_host = models.CharField(max_length=200, blank=True, default='')
    smtp_port = models.PositiveIntegerField(default=587)
    smtp_user = models.CharField(max_length=200, blank=True, default='')
    smtp_password = models.CharField(max_length=200, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Sync Settings"
        verbose_name_plural = "Sync Settings"

    def __str__(self):
        return f"{self.cron_frequency} at {self.cron_time}"

    @classmethod
    def load(cls):
        settings_row, _ = cls.objects.get_or_create(pk=1)
        return settings_row
