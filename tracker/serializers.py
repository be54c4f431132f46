from tracker.models import ContestResult, Student, Submission, SyncSettings


def _iso(value):
    return value.isoformat() if value else None


def student_summary(student: Student) -> dict:
    return {
        'id': student.id,
        'name': student.name,
        'email': student.email,
        'phone': student.phone,
        'codeforces_handle': student.codeforces_handle,
        'current_rating': student.current_rating,
        'max_rating': student.max_rating,
        'last_updated': _iso(student.last_updated),
        'is_active': student.is_active,
    }


def contest_payload(contest: ContestResult) -> dict:
    return {
        'contest_id': contest.contest_id,
        'contest_name': contest.contest_name,
        'handle': contest.handle,
        'rank': contest.rank,
        'rating_update_time_seconds': contest.rating_update_time_seconds,
        'old_rating': contest.old_rating,
        'new_rating': contest.new_rating,
    }


def submission_payload(sub: Submission) -> dict:
    return {
        'id': sub.submission_id,
        'contest_id': sub.contest_id,
        'creation_time_seconds': sub.creation_time_seconds,
        'relative_time_seconds': sub.relative_time_seconds,
        'problem': {
            'contest_id': sub.problem_contest_id,
            'index': sub.problem_index,
            'name': sub.problem_name,
            'type': sub.problem_type,
            'rating': sub.problem_rating,
            'tags': sub.problem_tags,
        },
        'author': sub.author,
        'programming_language': sub.programming_language,
        'verdict': sub.verdict,
        'testset': sub.testset,
        'passed_test_count': sub.passed_test_count,
        'time_consumed_millis': sub.time_consumed_millis,
        'memory_consumed_bytes': sub.memory_consumed_bytes,
    }


def student_detail(student: Student) -> dict:
    payload = student_summary(student)
    payload.update({
        'email_reminders_enabled': student.email_reminders_enabled,
        'reminder_count': student.reminder_count,
        'codeforces_data': {
            'contests': [contest_payload(c) for c in student.contests.order_by('position')],
            'submissions': [submission_payload(s) for s in student.submissions.order_by('position')],
            'last_sync_time': _iso(student.snapshot_synced_at),
        },
    })
    return payload


def settings_payload(row: SyncSettings) -> dict:
    # The SMTP password is write-only.
    return {
        'cron_time': row.cron_time,
        'cron_frequency': row.cron_frequency,
        'email_enabled': row.email_enabled,
        'inactivity_days': row.inactivity_days,
        'smtp_config': {
            'host': row.smtp_host,
            'port': row.smtp_port,
            'user': row.smtp_user,
            'has_password': bool(row.smtp_password),
        },
        'updated_at': _iso(row.updated_at),
    }
