from django.core.management.base import BaseCommand, CommandError

from tracker.models import Student
from tracker.services.sync import SyncConfig, sync_all_students


class Command(BaseCommand):
    help = "Fetch Codeforces data for every tracked student, one at a time."

    def add_arguments(self, parser):
        parser.add_argument(
            "--student-id",
            type=int,
            help="Only sync the given student.",
        )
        parser.add_argument(
            "--pacing",
            type=float,
            help="Seconds to wait between students (defaults to SYNC_PACING_SECONDS).",
        )

    def handle(self, *args, **options):
        student_id = options.get("student_id")
        pacing = options.get("pacing")
        if pacing is not None and pacing < 0:
            raise CommandError("--pacing must be >= 0")

        qs = Student.objects.all()
        if student_id:
            qs = qs.filter(id=student_id)
            if not qs.exists():
                raise CommandError(f"Student {student_id} not found.")

        report = sync_all_students(SyncConfig.load(pacing_seconds=pacing), queryset=qs)

        for failed_id, message in report.failed.items():
            self.stdout.write(self.style.WARNING(f"Student {failed_id}: {message}"))

        self.stdout.write(
            self.style.SUCCESS(
                f"Sync finished: {len(report.updated)}/{report.total} updated, {len(report.failed)} failed."
            )
        )
