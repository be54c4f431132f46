import logging
import time
from dataclasses import dataclass, field
from datetime import datetime

from django.conf import settings
from django.utils import timezone

from tracker.errors import HandleLookupError, PersistenceError
from tracker.models import Student, SyncSettings
from tracker.services.api_client import CodeforcesClient
from tracker.services.reconcile import reconcile_student

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncConfig:
    inactivity_days: int = 7
    pacing_seconds: float = 1.0
    email_enabled: bool = True
    cron_time: str = '02:00'
    cron_frequency: str = SyncSettings.FREQUENCY_DAILY

    @classmethod
    def load(cls, **overrides) -> 'SyncConfig':
        row = SyncSettings.load()
        values = {
            'inactivity_days': row.inactivity_days or getattr(settings, "DEFAULT_INACTIVITY_DAYS", 7),
            'pacing_seconds': getattr(settings, "SYNC_PACING_SECONDS", 1.0),
            'email_enabled': row.email_enabled,
            'cron_time': row.cron_time,
            'cron_frequency': row.cron_frequency,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


@dataclass
class SyncReport:
    total: int = 0
    updated: list[int] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)
    reminder_candidates: list[int] = field(default_factory=list)
    started_at: datetime | None = None
    finished_at: datetime | None = None

    def as_dict(self) -> dict:
        return {
            'total': self.total,
            'updated': len(self.updated),
            'failed': len(self.failed),
            'failures': {str(student_id): message for student_id, message in self.failed.items()},
            'reminder_candidates': self.reminder_candidates,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'finished_at': self.finished_at.isoformat() if self.finished_at else None,
        }


def refresh_student(student: Student, config: SyncConfig, client=CodeforcesClient) -> Student:
    bundle = client.fetch_profile(student.codeforces_handle)
    return reconcile_student(student, bundle, config.inactivity_days)


class SyncOrchestrator:
    """
    Sequential sync pass over every tracked student.

    One student at a time, in primary-key order, with a blocking pause after
    each one. A failing student is logged and skipped; the pass itself only
    raises if listing the students fails.
    """

    IDLE = 'IDLE'
    RUNNING = 'RUNNING'
    FETCHING = 'FETCHING'
    RECONCILING = 'RECONCILING'

    def __init__(self, config: SyncConfig, client=CodeforcesClient, sleep=time.sleep):
        self.config = config
        self.client = client
        self.sleep = sleep
        self.state = self.IDLE

    def _sync_one(self, student: Student) -> None:
        self.state = self.FETCHING
        bundle = self.client.fetch_profile(student.codeforces_handle)
        self.state = self.RECONCILING
        reconcile_student(student, bundle, self.config.inactivity_days)

    def _wants_reminder(self, student: Student) -> bool:
        return (
            self.config.email_enabled
            and student.email_reminders_enabled
            and not student.is_active
        )

    def run(self, queryset=None) -> SyncReport:
        if queryset is None:
            queryset = Student.objects.all()
        students = list(queryset.order_by('id'))

        report = SyncReport(total=len(students), started_at=timezone.now())
        self.state = self.RUNNING
        logger.info(f"Syncing data for {len(students)} students...")

        try:
            for student in students:
                try:
                    self._sync_one(student)
                except (HandleLookupError, PersistenceError) as exc:
                    report.failed[student.id] = str(exc)
                    logger.error(f"Failed to sync {student.name} ({student.codeforces_handle}): {exc}")
                except Exception as exc:
                    report.failed[student.id] = str(exc)
                    logger.exception(f"Unexpected error syncing {student.name} ({student.codeforces_handle})")
                else:
                    report.updated.append(student.id)
                    if self._wants_reminder(student):
                        # Delivery is not implemented; candidates are only reported.
                        report.reminder_candidates.append(student.id)
                        logger.info(f"{student.name} is inactive and eligible for a reminder email")
                finally:
                    self.state = self.RUNNING

                self.sleep(self.config.pacing_seconds)
        finally:
            self.state = self.IDLE

        report.finished_at = timezone.now()
        logger.info(
            f"Data sync completed: {len(report.updated)} updated, {len(report.failed)} failed"
        )
        return report


def sync_all_students(config: SyncConfig | None = None, client=CodeforcesClient, sleep=time.sleep, queryset=None) -> SyncReport:
    if config is None:
        config = SyncConfig.load()
    return SyncOrchestrator(config, client=client, sleep=sleep).run(queryset)
