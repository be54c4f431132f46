import logging
from dataclasses import dataclass, field
from typing import Any

import requests
from django.conf import settings

from tracker.errors import HandleLookupError

logger = logging.getLogger(__name__)


@dataclass
class ProfileBundle:
    user: dict[str, Any]
    contests: list[dict[str, Any]] = field(default_factory=list)
    submissions: list[dict[str, Any]] = field(default_factory=list)


def _normalize_contest(row: dict[str, Any]) -> dict[str, Any]:
    return {
        'contest_id': row.get('contestId'),
        'contest_name': row.get('contestName') or '',
        'handle': row.get('handle') or '',
        'rank': row.get('rank'),
        'rating_update_time_seconds': row.get('ratingUpdateTimeSeconds'),
        'old_rating': row.get('oldRating'),
        'new_rating': row.get('newRating'),
    }


def _normalize_submission(sub: dict[str, Any]) -> dict[str, Any]:
    problem = sub.get('problem') or {}
    author = sub.get('author') or {}
    return {
        'submission_id': sub.get('id'),
        'contest_id': sub.get('contestId'),
        'creation_time_seconds': sub.get('creationTimeSeconds'),
        'relative_time_seconds': sub.get('relativeTimeSeconds'),
        'problem_contest_id': problem.get('contestId'),
        'problem_index': problem.get('index') or '',
        'problem_name': problem.get('name') or '',
        'problem_type': problem.get('type') or '',
        'problem_rating': problem.get('rating'),
        'problem_tags': list(problem.get('tags') or []),
        'author': {
            'contest_id': author.get('contestId'),
            'members': [
                {'handle': member.get('handle')}
                for member in author.get('members') or []
            ],
            'participant_type': author.get('participantType'),
            'ghost': author.get('ghost'),
            'start_time_seconds': author.get('startTimeSeconds'),
        },
        'programming_language': sub.get('programmingLanguage') or '',
        'verdict': sub.get('verdict') or '',
        'testset': sub.get('testset') or '',
        'passed_test_count': sub.get('passedTestCount'),
        'time_consumed_millis': sub.get('timeConsumedMillis'),
        'memory_consumed_bytes': sub.get('memoryConsumedBytes'),
    }


class CodeforcesClient:
    """
    Read-only client for the three Codeforces lookups keyed by handle.

    Every failure (unknown handle, HTTP error, timeout, malformed body) is
    raised as HandleLookupError; there is no retry, callers decide what to do.
    """

    @classmethod
    def _base_url(cls) -> str:
        return getattr(settings, "CODEFORCES_API_URL", "https://codeforces.com/api").rstrip("/")

    @classmethod
    def _request(cls, method: str, handle: str, params: dict[str, Any]) -> Any:
        url = f"{cls._base_url()}/{method}"
        timeout = getattr(settings, "CODEFORCES_TIMEOUT_SECONDS", 10)
        try:
            response = requests.get(url, params=params, timeout=timeout)
        except requests.RequestException as exc:
            logger.warning(f"Codeforces {method} request failed for {handle}: {exc}")
            raise HandleLookupError(handle, f"Codeforces request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.warning(f"Codeforces {method} returned a non-JSON body for {handle} ({response.status_code})")
            raise HandleLookupError(handle, f"Codeforces returned HTTP {response.status_code}") from exc

        # Codeforces answers 400 with status FAILED for unknown handles
        if not isinstance(data, dict) or data.get('status') != 'OK':
            comment = data.get('comment', '') if isinstance(data, dict) else ''
            logger.warning(f"Codeforces API error for {handle} on {method}: {comment or response.status_code}")
            raise HandleLookupError(handle, comment or f"Codeforces returned HTTP {response.status_code}")

        return data.get('result')

    @classmethod
    def get_user_info(cls, handle: str) -> dict[str, Any]:
        result = cls._request('user.info', handle, {'handles': handle})
        if not result:
            raise HandleLookupError(handle, f"Codeforces user {handle} not found")
        return result[0]

    @classmethod
    def get_rating_changes(cls, handle: str) -> list[dict[str, Any]]:
        result = cls._request('user.rating', handle, {'handle': handle}) or []
        return [_normalize_contest(row) for row in result]

    @classmethod
    def get_submissions(cls, handle: str, count: int | None = None) -> list[dict[str, Any]]:
        if count is None:
            count = getattr(settings, "CODEFORCES_SUBMISSIONS_COUNT", 10000)
        params = {
            'handle': handle,
            'from': 1,
            'count': count,
        }
        result = cls._request('user.status', handle, params) or []
        return [_normalize_submission(sub) for sub in result]

    @classmethod
    def fetch_profile(cls, handle: str) -> ProfileBundle:
        if not handle:
            raise HandleLookupError(handle, "Codeforces handle is empty")

        user = cls.get_user_info(handle)
        contests = cls.get_rating_changes(handle)
        submissions = cls.get_submissions(handle)
        logger.debug(
            f"Fetched {handle}: {len(contests)} contests, {len(submissions)} submissions"
        )
        return ProfileBundle(user=user, contests=contests, submissions=submissions)
