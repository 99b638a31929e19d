"""
Add Celery Beat schedule for chat maintenance.

- Purge threads both participants have deleted (hourly)
"""

from django.db import migrations

PURGE_TASK_NAME = "Chat: Purge Abandoned Threads"


def create_periodic_tasks(apps, schema_editor):
    """Create periodic tasks for chat maintenance."""
    IntervalSchedule = apps.get_model("django_celery_beat", "IntervalSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    # Every 1 hour
    schedule_1hour, _ = IntervalSchedule.objects.get_or_create(
        every=1,
        period="hours",
    )

    PeriodicTask.objects.get_or_create(
        name=PURGE_TASK_NAME,
        defaults={
            "task": "chat.tasks.purge_abandoned_threads",
            "interval": schedule_1hour,
            "enabled": True,
            "description": (
                "Permanently deletes threads that every participant has "
                "deleted, together with their messages."
            ),
        },
    )


def remove_periodic_tasks(apps, schema_editor):
    """Remove chat periodic tasks on migration rollback."""
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")
    PeriodicTask.objects.filter(name=PURGE_TASK_NAME).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("chat", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_tasks, remove_periodic_tasks),
    ]
