from datetime import timedelta

from django.utils import timezone

from tracker.errors import HandleLookupError
from tracker.services.api_client import ProfileBundle


def ts_days_ago(days: float) -> int:
    return int((timezone.now() - timedelta(days=days)).timestamp())


def make_submission(submission_id: int, days_ago: float, verdict: str = "OK") -> dict:
    return {
        "submission_id": submission_id,
        "contest_id": 1900,
        "creation_time_seconds": ts_days_ago(days_ago),
        "relative_time_seconds": 2147483647,
        "problem_contest_id": 1900,
        "problem_index": "A",
        "problem_name": "Cover in Water",
        "problem_type": "PROGRAMMING",
        "problem_rating": 800,
        "problem_tags": ["greedy", "strings"],
        "author": {
            "contest_id": 1900,
            "members": [{"handle": "alice_cf"}],
            "participant_type": "PRACTICE",
            "ghost": False,
            "start_time_seconds": None,
        },
        "programming_language": "GNU C++17",
        "verdict": verdict,
        "testset": "TESTS",
        "passed_test_count": 12,
        "time_consumed_millis": 15,
        "memory_consumed_bytes": 0,
    }


def make_contest(contest_id: int, old_rating: int, new_rating: int) -> dict:
    return {
        "contest_id": contest_id,
        "contest_name": f"Codeforces Round {contest_id} (Div. 2)",
        "handle": "alice_cf",
        "rank": 1234,
        "rating_update_time_seconds": ts_days_ago(30),
        "old_rating": old_rating,
        "new_rating": new_rating,
    }


def make_bundle(rating=None, max_rating=None, contests=None, submissions=None) -> ProfileBundle:
    user = {"handle": "alice_cf"}
    if rating is not None:
        user["rating"] = rating
    if max_rating is not None:
        user["maxRating"] = max_rating
    return ProfileBundle(
        user=user,
        contests=list(contests or []),
        submissions=list(submissions or []),
    )


class FakeClient:
    """Stands in for CodeforcesClient; handles listed in ``failing`` raise."""

    def __init__(self, bundles=None, failing=(), default=None):
        self.bundles = bundles or {}
        self.failing = set(failing)
        self.default = default
        self.calls = []

    def fetch_profile(self, handle):
        self.calls.append(handle)
        if handle in self.failing:
            raise HandleLookupError(handle, f"handles: User with handle {handle} not found")
        if handle in self.bundles:
            return self.bundles[handle]
        if self.default is not None:
            return self.default
        return make_bundle(rating=1200, max_rating=1300)
