"""
Tests for chat Celery tasks.

This module tests:
- purge_abandoned_threads: periodic removal of threads both sides deleted
- the beat schedule created by migration 0002
"""

from unittest.mock import patch

from django_celery_beat.models import PeriodicTask

from chat.models import Message, Thread
from chat.tasks import purge_abandoned_threads
from chat.tests.factories import MessageFactory, ThreadFactory


def abandon(thread):
    for user_id in thread.participant_ids:
        thread.add_hidden(user_id)
    return thread


class TestPurgeAbandonedThreadsTask:
    def test_purges_and_returns_count(self, renter, owner):
        gone = abandon(ThreadFactory(user_a=renter, user_b=owner))
        MessageFactory(thread=gone, sender=renter)
        kept = ThreadFactory(user_a=renter, user_b=owner)

        result = purge_abandoned_threads.apply()

        assert result.get() == 1
        assert list(Thread.objects.all()) == [kept]
        assert not Message.objects.filter(thread_id=gone.pk).exists()

    def test_batch_size_is_forwarded(self, renter, owner):
        for _ in range(3):
            abandon(ThreadFactory(user_a=renter, user_b=owner))

        assert purge_abandoned_threads.apply(kwargs={"batch_size": 1}).get() == 1
        assert Thread.objects.count() == 2

    def test_default_batch_size_from_settings(self, settings, renter, owner):
        settings.CHAT_ABANDONED_PURGE_BATCH_SIZE = 2
        for _ in range(3):
            abandon(ThreadFactory(user_a=renter, user_b=owner))

        assert purge_abandoned_threads() == 2

    def test_delegates_to_service(self, db):
        with patch(
            "chat.tasks.ChatService.purge_abandoned_threads", return_value=4
        ) as purge:
            assert purge_abandoned_threads(batch_size=10) == 4

        purge.assert_called_once_with(10)


class TestBeatSchedule:
    def test_purge_is_scheduled_hourly(self, db):
        """
        The purge runs without anyone calling it.

        Why it matters: Nothing else removes threads both participants
        deleted, so a missing schedule would let them pile up.
        """
        task = PeriodicTask.objects.get(name="Chat: Purge Abandoned Threads")

        assert task.task == "chat.tasks.purge_abandoned_threads"
        assert task.enabled is True
        assert (task.interval.every, task.interval.period) == (1, "hours")
