import logging

from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import DatabaseError
from django.utils import timezone

from tracker.errors import PersistenceError
from tracker.models import Student
from tracker.services.api_client import CodeforcesClient
from tracker.services.reconcile import reconcile_student

logger = logging.getLogger(__name__)

CREATE_REQUIRED_FIELDS = ('name', 'email', 'phone', 'codeforces_handle')
UPDATE_REQUIRED_FIELDS = ('name', 'email', 'codeforces_handle')


def _clean_text(value) -> str:
    if value is None:
        return ''
    return str(value).strip()


def clean_bool(value, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {'1', 'true', 'on', 'yes'}
    return bool(value)


def _clean_fields(data: dict, required: tuple[str, ...]) -> dict:
    cleaned = {
        'name': _clean_text(data.get('name')),
        'email': _clean_text(data.get('email')).lower(),
        'phone': _clean_text(data.get('phone')),
        'codeforces_handle': _clean_text(data.get('codeforces_handle')),
    }
    missing = [name for name in required if not cleaned[name]]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    try:
        validate_email(cleaned['email'])
    except ValidationError:
        raise ValidationError("Invalid email address.") from None
    return cleaned


def _check_unique(cleaned: dict, exclude_id=None) -> None:
    others = Student.objects.all()
    if exclude_id is not None:
        others = others.exclude(id=exclude_id)
    if others.filter(email__iexact=cleaned['email']).exists():
        raise ValidationError("Email is already in use.")
    if others.filter(codeforces_handle__iexact=cleaned['codeforces_handle']).exists():
        raise ValidationError("Codeforces handle is already in use.")


def create_student(data: dict, inactivity_days: int, client=CodeforcesClient) -> Student:
    """
    Validate, fetch the Codeforces profile, and save a new student.

    Raises ValidationError for bad input, HandleLookupError when the handle
    cannot be fetched (nothing is saved), PersistenceError on DB failure.
    """
    cleaned = _clean_fields(data, CREATE_REQUIRED_FIELDS)
    _check_unique(cleaned)

    bundle = client.fetch_profile(cleaned['codeforces_handle'])

    student = Student(
        **cleaned,
        email_reminders_enabled=clean_bool(data.get('email_reminders_enabled'), True),
        is_active=clean_bool(data.get('is_active'), True),
    )
    return reconcile_student(student, bundle, inactivity_days)


def update_student(student: Student, data: dict, inactivity_days: int, client=CodeforcesClient) -> Student:
    """
    Apply an edit to ``student``.

    Codeforces is only queried when the handle changed; the lookup happens
    before any field is touched, so a failed lookup leaves the record as it
    was. With the same handle the ratings and snapshot are kept verbatim.
    """
    cleaned = _clean_fields(data, UPDATE_REQUIRED_FIELDS)
    _check_unique(cleaned, exclude_id=student.id)

    # Codeforces handles are case-insensitive; a case-only edit is not a new handle.
    handle_changed = cleaned['codeforces_handle'].lower() != student.codeforces_handle.lower()
    bundle = None
    if handle_changed:
        bundle = client.fetch_profile(cleaned['codeforces_handle'])

    for name, value in cleaned.items():
        setattr(student, name, value)
    student.email_reminders_enabled = clean_bool(
        data.get('email_reminders_enabled'), student.email_reminders_enabled
    )
    student.is_active = clean_bool(data.get('is_active'), student.is_active)

    if bundle is not None:
        logger.info(f"Handle changed for student {student.id}; refetched {student.codeforces_handle}")
        return reconcile_student(student, bundle, inactivity_days)

    student.last_updated = timezone.now()
    try:
        student.save(update_fields=[
            'name',
            'email',
            'phone',
            'codeforces_handle',
            'email_reminders_enabled',
            'is_active',
            'last_updated',
            'updated_at',
        ])
    except DatabaseError as exc:
        logger.error(f"Failed to update student {student.id}: {exc}")
        raise PersistenceError(f"Could not save student {student.id}") from exc
    return student


def delete_student(student: Student) -> None:
    try:
        student.delete()
    except DatabaseError as exc:
        logger.error(f"Failed to delete student {student.id}: {exc}")
        raise PersistenceError(f"Could not delete student {student.id}") from exc
