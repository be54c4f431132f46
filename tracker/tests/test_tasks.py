from io import StringIO
from unittest.mock import patch

from django.core.management import CommandError, call_command
from django.test import TestCase, override_settings

from tracker import tasks
from tracker.models import Student
from tracker.services.api_client import CodeforcesClient
from tracker.tests.helpers import FakeClient, make_bundle


@override_settings(SYNC_PACING_SECONDS=0)
class SyncTaskTests(TestCase):
    def setUp(self):
        self.alice = Student.objects.create(name="Alice", email="a@example.com", codeforces_handle="alice_cf")
        self.bob = Student.objects.create(name="Bob", email="b@example.com", codeforces_handle="bob_cf")
        self.client_stub = FakeClient(failing={"bob_cf"}, default=make_bundle(rating=1500))

    def test_sync_all_students_task_records_health(self):
        with patch.object(CodeforcesClient, "fetch_profile", side_effect=self.client_stub.fetch_profile):
            with patch.object(tasks, "_set_task_health") as health_mock:
                result = tasks.sync_all_students()

        self.assertEqual(result, "Synced 1/2 students, 1 failed.")
        health_mock.assert_called_once()
        task_name, payload = health_mock.call_args.args
        self.assertEqual(task_name, "sync_all_students")
        self.assertEqual(payload["failed"], 1)
        self.alice.refresh_from_db()
        self.assertEqual(self.alice.current_rating, 1500)

    def test_refresh_student_task(self):
        with patch.object(CodeforcesClient, "fetch_profile", side_effect=self.client_stub.fetch_profile):
            ok = tasks.refresh_student(self.alice.id)
            failed = tasks.refresh_student(self.bob.id)
            missing = tasks.refresh_student(999999)

        self.assertIn("Updated Alice", ok)
        self.assertIn("Error updating student", failed)
        self.assertIn("not found", missing)

    def test_task_health_write_failure_is_logged(self):
        import redis

        class BrokenRedis:
            def set(self, *args, **kwargs):
                raise redis.ConnectionError("no redis")

        with patch.object(tasks, "_get_redis_client", return_value=BrokenRedis()):
            with self.assertLogs("tracker.tasks", level="ERROR"):
                tasks._set_task_health("sync_all_students", {"total": 0})

    def test_task_health_unexpected_error_is_logged(self):
        class OddRedis:
            def set(self, *args, **kwargs):
                raise OSError("socket closed")

        with patch.object(tasks, "_get_redis_client", return_value=OddRedis()):
            with self.assertLogs("tracker.tasks", level="ERROR"):
                tasks._set_task_health("sync_all_students", {"total": 0})


@override_settings(SYNC_PACING_SECONDS=0)
class SyncStudentsCommandTests(TestCase):
    def setUp(self):
        self.alice = Student.objects.create(name="Alice", email="a@example.com", codeforces_handle="alice_cf")
        self.bob = Student.objects.create(name="Bob", email="b@example.com", codeforces_handle="bob_cf")

    def test_command_syncs_everyone_and_reports_failures(self):
        stub = FakeClient(failing={"alice_cf"}, default=make_bundle(rating=1111))
        out = StringIO()
        with patch.object(CodeforcesClient, "fetch_profile", side_effect=stub.fetch_profile):
            call_command("sync_students", stdout=out)

        output = out.getvalue()
        self.assertIn("1/2 updated, 1 failed", output)
        self.assertIn(f"Student {self.alice.id}", output)
        self.bob.refresh_from_db()
        self.assertEqual(self.bob.current_rating, 1111)

    def test_command_single_student(self):
        stub = FakeClient(default=make_bundle(rating=999))
        out = StringIO()
        with patch.object(CodeforcesClient, "fetch_profile", side_effect=stub.fetch_profile):
            call_command("sync_students", "--student-id", str(self.bob.id), "--pacing", "0", stdout=out)

        self.assertEqual(stub.calls, ["bob_cf"])
        self.assertIn("1/1 updated", out.getvalue())

    def test_command_unknown_student(self):
        with self.assertRaises(CommandError):
            call_command("sync_students", "--student-id", "424242", stdout=StringIO())

    def test_command_rejects_negative_pacing(self):
        with self.assertRaises(CommandError):
            call_command("sync_students", "--pacing", "-1", stdout=StringIO())
