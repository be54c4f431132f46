import re

from django.core.exceptions import ValidationError

from tracker.models import SyncSettings
from tracker.services.students import clean_bool

CRON_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _positive_int(value, label: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be an integer.") from None
    if number <= 0:
        raise ValidationError(f"{label} must be positive.")
    return number


def update_sync_settings(data: dict) -> SyncSettings:
    """Partial update of the single SyncSettings row; unknown keys are ignored."""
    row = SyncSettings.load()
    update_fields = []

    if 'cron_time' in data:
        cron_time = str(data['cron_time'] or '').strip()
        if not CRON_TIME_RE.match(cron_time):
            raise ValidationError("cron_time must be HH:MM.")
        row.cron_time = cron_time
        update_fields.append('cron_time')

    if 'cron_frequency' in data:
        valid = {value for value, _ in SyncSettings.FREQUENCY_CHOICES}
        if data['cron_frequency'] not in valid:
            raise ValidationError(f"cron_frequency must be one of: {', '.join(sorted(valid))}.")
        row.cron_frequency = data['cron_frequency']
        update_fields.append('cron_frequency')

    if 'email_enabled' in data:
        row.email_enabled = clean_bool(data['email_enabled'], row.email_enabled)
        update_fields.append('email_enabled')

    if 'inactivity_days' in data:
        row.inactivity_days = _positive_int(data['inactivity_days'], "inactivity_days")
        update_fields.append('inactivity_days')

    smtp = data.get('smtp_config') or {}
    if not isinstance(smtp, dict):
        raise ValidationError("smtp_config must be an object.")
    if 'host' in smtp:
        row.smtp_host = str(smtp['host'] or '').strip()
        update_fields.append('smtp_host')
    if 'port' in smtp:
        row.smtp_port = _positive_int(smtp['port'], "smtp_config.port")
        update_fields.append('smtp_port')
    if 'user' in smtp:
        row.smtp_user = str(smtp['user'] or '').strip()
        update_fields.append('smtp_user')
    if 'password' in smtp:
        row.smtp_password = str(smtp['password'] or '')
        update_fields.append('smtp_password')

    if update_fields:
        row.save(update_fields=update_fields + ['updated_at'])
    return row
