import json
import logging

from celery import shared_task
from django.conf import settings
from django.utils import timezone
import redis

from .errors import HandleLookupError, PersistenceError
from .models import Student
from .services.sync import SyncConfig, refresh_student as refresh_student_record, sync_all_students as run_sync

logger = logging.getLogger(__name__)

_redis_client = None


def _get_redis_client():
    global _redis_client
    if _redis_client is None:
        url = getattr(settings, "CELERY_BROKER_URL", "redis://localhost:6379/0")
        _redis_client = redis.Redis.from_url(url)
    return _redis_client


def _set_task_health(task_name: str, payload: dict, ttl_seconds: int = 2 * 24 * 3600) -> None:
    data = {
        "task": task_name,
        "at": timezone.now().isoformat(),
        **(payload or {}),
    }
    try:
        _get_redis_client().set(
            f"task_health:{task_name}",
            json.dumps(data, default=str),
            ex=ttl_seconds,
        )
    except Exception:
        logger.exception("Failed to store task health for %s", task_name)


@shared_task
def sync_all_students(pacing_seconds=None):
    config = SyncConfig.load(pacing_seconds=pacing_seconds)
    report = run_sync(config)
    _set_task_health("sync_all_students", report.as_dict())
    return f"Synced {len(report.updated)}/{report.total} students, {len(report.failed)} failed."


@shared_task
def refresh_student(student_id):
    try:
        student = Student.objects.get(id=student_id)
    except Student.DoesNotExist:
        return f"Student with ID {student_id} not found."

    try:
        refresh_student_record(student, SyncConfig.load())
    except (HandleLookupError, PersistenceError) as e:
        logger.error(f"Failed to refresh {student.codeforces_handle}: {e}")
        return f"Error updating student {student_id}: {e}"

    return f"Updated {student.name}: rating {student.current_rating}, active={student.is_active}."
