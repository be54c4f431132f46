import logging

from django.db import DatabaseError, transaction
from django.utils import timezone

from tracker.errors import PersistenceError
from tracker.models import ContestResult, Student, Submission
from tracker.services.activity import is_active
from tracker.services.api_client import ProfileBundle

logger = logging.getLogger(__name__)


def apply_profile(student: Student, bundle: ProfileBundle, inactivity_days: int, now=None) -> Student:
    """
    Copy rating fields and the activity flag from ``bundle`` onto ``student``.

    Nothing is saved here. ``is_active`` is only recomputed when Codeforces
    returned at least one submission; an empty list keeps the previous value.
    """
    now = now or timezone.now()
    user = bundle.user or {}

    rating = user.get('rating')
    student.current_rating = rating or 0
    student.max_rating = user.get('maxRating') or rating or 0

    if bundle.submissions:
        student.is_active = is_active(bundle.submissions, inactivity_days, now=now)

    student.snapshot_synced_at = now
    student.last_updated = now
    return student


def _replace_snapshot(student: Student, bundle: ProfileBundle) -> None:
    student.contests.all().delete()
    student.submissions.all().delete()

    ContestResult.objects.bulk_create([
        ContestResult(student=student, position=position, **row)
        for position, row in enumerate(bundle.contests)
    ])
    Submission.objects.bulk_create([
        Submission(student=student, position=position, **row)
        for position, row in enumerate(bundle.submissions)
    ])


def reconcile_student(student: Student, bundle: ProfileBundle, inactivity_days: int, now=None) -> Student:
    """
    Merge a freshly fetched bundle into ``student`` and persist it.

    The contest and submission rows are overwritten wholesale, never merged.
    Works for unsaved students too (the add flow). Database failures are
    raised as PersistenceError.
    """
    apply_profile(student, bundle, inactivity_days, now=now)
    try:
        with transaction.atomic():
            # A student deleted mid-sync must stay deleted.
            student.save(force_update=student.pk is not None)
            _replace_snapshot(student, bundle)
    except DatabaseError as exc:
        logger.error(f"Failed to persist {student.codeforces_handle}: {exc}")
        raise PersistenceError(f"Could not save student {student.codeforces_handle}") from exc

    logger.info(
        f"Updated data for {student.name} ({student.codeforces_handle}): "
        f"rating={student.current_rating} max={student.max_rating} active={student.is_active}"
    )
    return student
