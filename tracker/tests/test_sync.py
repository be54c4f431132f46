from unittest.mock import MagicMock, patch

from django.db import DatabaseError
from django.test import TestCase, override_settings

from tracker.models import Student, SyncSettings
from tracker.services.sync import SyncConfig, SyncOrchestrator, sync_all_students
from tracker.tests.helpers import FakeClient, make_bundle, make_submission


def _student(n, **extra):
    return Student.objects.create(
        name=f"Student {n}",
        email=f"s{n}@example.com",
        phone=f"555-010{n}",
        codeforces_handle=f"handle_{n}",
        **extra,
    )


class SyncConfigTests(TestCase):
    @override_settings(SYNC_PACING_SECONDS=2.5)
    def test_load_reads_settings_row_and_django_settings(self):
        row = SyncSettings.load()
        row.inactivity_days = 14
        row.email_enabled = False
        row.cron_frequency = SyncSettings.FREQUENCY_WEEKLY
        row.save()

        config = SyncConfig.load()

        self.assertEqual(config.inactivity_days, 14)
        self.assertFalse(config.email_enabled)
        self.assertEqual(config.pacing_seconds, 2.5)
        self.assertEqual(config.cron_frequency, "weekly")
        self.assertEqual(config.cron_time, "02:00")

    def test_overrides_ignore_none(self):
        config = SyncConfig.load(pacing_seconds=None, inactivity_days=3)
        self.assertEqual(config.inactivity_days, 3)
        self.assertEqual(config.pacing_seconds, 1.0)


class SyncOrchestratorTests(TestCase):
    def setUp(self):
        self.students = [_student(n) for n in range(1, 5)]
        self.config = SyncConfig(inactivity_days=7, pacing_seconds=1.0, email_enabled=True)

    def test_one_failing_handle_does_not_abort_the_batch(self):
        client = FakeClient(failing={"handle_2"}, default=make_bundle(rating=1400, max_rating=1500))
        sleep = MagicMock()

        report = sync_all_students(self.config, client=client, sleep=sleep)

        self.assertEqual(report.total, 4)
        self.assertEqual(sorted(report.updated), [self.students[0].id, self.students[2].id, self.students[3].id])
        self.assertEqual(list(report.failed), [self.students[1].id])
        self.assertIn("not found", report.failed[self.students[1].id])

        for student in self.students:
            student.refresh_from_db()
        self.assertEqual(self.students[0].current_rating, 1400)
        self.assertEqual(self.students[1].current_rating, 0)
        self.assertEqual(self.students[2].current_rating, 1400)
        self.assertEqual(self.students[3].current_rating, 1400)

    def test_pacing_sleep_after_every_student(self):
        client = FakeClient(failing={"handle_3"})
        sleep = MagicMock()

        sync_all_students(self.config, client=client, sleep=sleep)

        self.assertEqual(sleep.call_count, 4)
        for call in sleep.call_args_list:
            self.assertEqual(call.args, (1.0,))

    def test_students_processed_sequentially_in_id_order(self):
        client = FakeClient()
        sync_all_students(self.config, client=client, sleep=MagicMock())
        self.assertEqual(client.calls, ["handle_1", "handle_2", "handle_3", "handle_4"])

    def test_persistence_failure_only_aborts_that_student(self):
        client = FakeClient(default=make_bundle(rating=1600))
        original_save = Student.save

        def flaky_save(instance, *args, **kwargs):
            if instance.codeforces_handle == "handle_1":
                raise DatabaseError("write failed")
            return original_save(instance, *args, **kwargs)

        with patch.object(Student, "save", autospec=True, side_effect=flaky_save):
            report = sync_all_students(self.config, client=client, sleep=MagicMock())

        self.assertEqual(list(report.failed), [self.students[0].id])
        self.assertEqual(len(report.updated), 3)
        self.assertEqual(Student.objects.get(pk=self.students[0].pk).current_rating, 0)
        self.assertEqual(Student.objects.get(pk=self.students[1].pk).current_rating, 1600)

    def test_unexpected_error_is_logged_and_skipped(self):
        client = FakeClient()
        client.fetch_profile = MagicMock(side_effect=[RuntimeError("boom"), make_bundle(), make_bundle(), make_bundle()])

        with self.assertLogs("tracker.services.sync", level="ERROR"):
            report = sync_all_students(self.config, client=client, sleep=MagicMock())

        self.assertEqual(len(report.failed), 1)
        self.assertEqual(len(report.updated), 3)

    def test_reminder_candidates_are_inactive_opted_in_students(self):
        self.students[1].email_reminders_enabled = False
        self.students[1].save()
        stale = make_bundle(submissions=[make_submission(1, days_ago=30)])
        fresh = make_bundle(submissions=[make_submission(2, days_ago=1)])
        client = FakeClient(bundles={
            "handle_1": stale,
            "handle_2": stale,
            "handle_3": fresh,
            "handle_4": stale,
        })

        report = sync_all_students(self.config, client=client, sleep=MagicMock())

        self.assertEqual(report.reminder_candidates, [self.students[0].id, self.students[3].id])

    def test_no_reminder_candidates_when_email_disabled(self):
        config = SyncConfig(inactivity_days=7, pacing_seconds=0, email_enabled=False)
        client = FakeClient(default=make_bundle(submissions=[make_submission(1, days_ago=30)]))
        report = sync_all_students(config, client=client, sleep=MagicMock())
        self.assertEqual(report.reminder_candidates, [])

    def test_state_returns_to_idle(self):
        orchestrator = SyncOrchestrator(self.config, client=FakeClient(failing={"handle_4"}), sleep=MagicMock())
        self.assertEqual(orchestrator.state, SyncOrchestrator.IDLE)
        report = orchestrator.run()
        self.assertEqual(orchestrator.state, SyncOrchestrator.IDLE)
        self.assertIsNotNone(report.started_at)
        self.assertIsNotNone(report.finished_at)

    def test_queryset_limits_the_run(self):
        client = FakeClient()
        report = sync_all_students(
            self.config,
            client=client,
            sleep=MagicMock(),
            queryset=Student.objects.filter(id=self.students[2].id),
        )
        self.assertEqual(report.total, 1)
        self.assertEqual(client.calls, ["handle_3"])

    def test_report_as_dict(self):
        report = sync_all_students(self.config, client=FakeClient(failing={"handle_1"}), sleep=MagicMock())
        payload = report.as_dict()
        self.assertEqual(payload["total"], 4)
        self.assertEqual(payload["updated"], 3)
        self.assertEqual(payload["failed"], 1)
        self.assertIn(str(self.students[0].id), payload["failures"])

    def test_student_deleted_during_pass_is_not_recreated(self):
        doomed = self.students[1]
        client = FakeClient(default=make_bundle(rating=1700))
        fetch = client.fetch_profile

        def fetch_then_delete(handle):
            bundle = fetch(handle)
            if handle == doomed.codeforces_handle:
                Student.objects.filter(pk=doomed.pk).delete()
            return bundle

        client.fetch_profile = fetch_then_delete
        report = sync_all_students(self.config, client=client, sleep=MagicMock())

        self.assertFalse(Student.objects.filter(pk=doomed.pk).exists())
        self.assertEqual(list(report.failed), [doomed.pk])
        self.assertEqual(len(report.updated), 3)
        self.assertEqual(Student.objects.count(), 3)
