import json
import logging

from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .errors import HandleLookupError, PersistenceError
from .models import Student, SyncSettings
from .serializers import settings_payload, student_detail, student_summary
from .services.students import create_student, delete_student, update_student
from .services.sync import SyncConfig, sync_all_students
from .services.sync_settings import update_sync_settings

logger = logging.getLogger(__name__)


def _error(message: str, status: int) -> JsonResponse:
    return JsonResponse({'error': message}, status=status)


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(exc.messages)


def _read_json(request) -> dict:
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Request body must be valid JSON.") from None
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


def _get_student(student_id):
    try:
        return Student.objects.get(id=int(student_id))
    except (Student.DoesNotExist, TypeError, ValueError):
        return None


def health(request):
    return JsonResponse({'status': 'ok', 'service': 'cftracker'})


@csrf_exempt
@require_http_methods(["POST"])
def add_student(request):
    try:
        data = _read_json(request)
        config = SyncConfig.load()
        student = create_student(data, config.inactivity_days)
    except ValidationError as exc:
        return _error(_validation_message(exc), 400)
    except HandleLookupError as exc:
        logger.warning(f"Rejected new student, lookup failed: {exc}")
        return _error("Failed to fetch Codeforces data. Please check the handle.", 400)
    except PersistenceError:
        return _error("Internal server error", 500)

    return JsonResponse(student_detail(student), status=201)


@require_http_methods(["GET"])
def list_students(request):
    students = Student.objects.order_by('id')
    return JsonResponse([student_summary(s) for s in students], safe=False)


@require_http_methods(["GET"])
def student_details(request, student_id):
    student = _get_student(student_id)
    if student is None:
        return _error("Student not found", 404)
    return JsonResponse(student_detail(student))


@csrf_exempt
@require_http_methods(["PUT"])
def edit_student(request):
    try:
        data = _read_json(request)
    except ValidationError as exc:
        return _error(_validation_message(exc), 400)

    student = _get_student(data.get('id'))
    if student is None:
        return _error("Student not found", 404)

    try:
        config = SyncConfig.load()
        student = update_student(student, data, config.inactivity_days)
    except ValidationError as exc:
        return _error(_validation_message(exc), 400)
    except HandleLookupError as exc:
        logger.warning(f"Rejected edit of student {student.id}, lookup failed: {exc}")
        return _error("Failed to fetch Codeforces data. Please check the handle.", 400)
    except PersistenceError:
        return _error("Internal server error", 500)

    return JsonResponse(student_detail(student))


@csrf_exempt
@require_http_methods(["DELETE"])
def remove_student(request, student_id):
    student = _get_student(student_id)
    if student is None:
        return _error("Student not found", 404)

    try:
        delete_student(student)
    except PersistenceError:
        return _error("Internal server error", 500)
    return JsonResponse({'message': "Student deleted successfully"})


@csrf_exempt
@require_http_methods(["POST"])
def trigger_sync(request):
    report = sync_all_students(SyncConfig.load())
    return JsonResponse({'message': "Sync completed successfully", 'report': report.as_dict()})


@csrf_exempt
@require_http_methods(["GET", "PUT"])
def sync_settings(request):
    if request.method == "GET":
        return JsonResponse(settings_payload(SyncSettings.load()))

    try:
        row = update_sync_settings(_read_json(request))
    except ValidationError as exc:
        return _error(_validation_message(exc), 400)
    return JsonResponse(settings_payload(row))
