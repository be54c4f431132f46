import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Student',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('phone', models.CharField(blank=True, default='', max_length=50)),
                ('codeforces_handle', models.CharField(max_length=100, unique=True)),
                ('current_rating', models.IntegerField(default=0)),
                ('max_rating', models.IntegerField(default=0)),
                ('last_updated', models.DateTimeField(default=django.utils.timezone.now)),
                ('snapshot_synced_at', models.DateTimeField(blank=True, null=True)),
                ('email_reminders_enabled', models.BooleanField(default=True)),
                ('reminder_count', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Student',
                'verbose_name_plural': 'Students',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='SyncSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('cron_time', models.CharField(default='02:00', help_text='HH:MM', max_length=5)),
                ('cron_frequency', models.CharField(choices=[('daily', 'Daily'), ('twice-daily', 'Twice daily'), ('weekly', 'Weekly')], default='daily', max_length=20)),
                ('email_enabled', models.BooleanField(default=True)),
                ('inactivity_days', models.PositiveIntegerField(default=7)),
                ('smtp_host', models.CharField(blank=True, default='', max_length=200)),
                ('smtp_port', models.PositiveIntegerField(default=587)),
                ('smtp_user', models.CharField(blank=True, default='', max_length=200)),
                ('smtp_password', models.CharField(blank=True, default='', max_length=200)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Sync Settings',
                'verbose_name_plural': 'Sync Settings',
            },
        ),
        migrations.CreateModel(
            name='ContestResult',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0, help_text='Order returned by Codeforces')),
                ('contest_id', models.IntegerField(blank=True, null=True)),
                ('contest_name', models.CharField(blank=True, default='', max_length=300)),
                ('handle', models.CharField(blank=True, default='', max_length=100)),
                ('rank', models.IntegerField(blank=True, null=True)),
                ('rating_update_time_seconds', models.BigIntegerField(blank=True, null=True)),
                ('old_rating', models.IntegerField(blank=True, null=True)),
                ('new_rating', models.IntegerField(blank=True, null=True)),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='contests', to='tracker.student')),
            ],
            options={
                'verbose_name': 'Contest Result',
                'verbose_name_plural': 'Contest Results',
                'ordering': ['student', 'position'],
                'indexes': [models.Index(fields=['student', 'position'], name='tracker_con_student_5c1e0a_idx')],
            },
        ),
        migrations.CreateModel(
            name='Submission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0, help_text='Order returned by Codeforces')),
                ('submission_id', models.BigIntegerField(blank=True, null=True)),
                ('contest_id', models.IntegerField(blank=True, null=True)),
                ('creation_time_seconds', models.BigIntegerField(blank=True, null=True)),
                ('relative_time_seconds', models.BigIntegerField(blank=True, null=True)),
                ('problem_contest_id', models.IntegerField(blank=True, null=True)),
                ('problem_index', models.CharField(blank=True, default='', max_length=10)),
                ('problem_name', models.CharField(blank=True, default='', max_length=300)),
                ('problem_type', models.CharField(blank=True, default='', max_length=50)),
                ('problem_rating', models.IntegerField(blank=True, null=True)),
                ('problem_tags', models.JSONField(blank=True, default=list)),
                ('author', models.JSONField(blank=True, default=dict)),
                ('programming_language', models.CharField(blank=True, default='', max_length=100)),
                ('verdict', models.CharField(blank=True, default='', max_length=50)),
                ('testset', models.CharField(blank=True, default='', max_length=50)),
                ('passed_test_count', models.IntegerField(blank=True, null=True)),
                ('time_consumed_millis', models.IntegerField(blank=True, null=True)),
                ('memory_consumed_bytes', models.BigIntegerField(blank=True, null=True)),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='submissions', to='tracker.student')),
            ],
            options={
                'verbose_name': 'Submission',
                'verbose_name_plural': 'Submissions',
                'ordering': ['student', 'position'],
                'indexes': [
                    models.Index(fields=['student', 'position'], name='tracker_sub_student_8f2b7d_idx'),
                    models.Index(fields=['creation_time_seconds'], name='tracker_sub_creatio_3a9e41_idx'),
                ],
            },
        ),
    ]
