from datetime import timedelta

from django.utils import timezone


def is_active(submissions, window_days, now=None):
    """
    True if any submission was created within the last ``window_days`` days.

    Submissions are the normalized dicts produced by the Codeforces client
    (``creation_time_seconds`` is a unix timestamp). The window is closed on
    both ends: ``[now - window_days, now]``.
    """
    now = now or timezone.now()
    window_end = int(now.timestamp())
    window_start = int((now - timedelta(days=window_days)).timestamp())

    for sub in submissions:
        created = sub.get('creation_time_seconds')
        if created is None:
            continue
        if window_start <= created <= window_end:
            return True
    return False
