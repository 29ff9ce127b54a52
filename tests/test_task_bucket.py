"""
Tests for the per-project task limit.
"""
import os
import sys

os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ['TICK_INTERVAL_SECONDS'] = '3600'

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import unittest
from unittest.mock import Mock

from focusroom.focus import (
    CLEAR_COMPLETED_MESSAGE,
    COMPLETE_EXISTING_MESSAGE,
    MAX_TASKS,
    TaskBucketGate,
)


class TestTaskBucketGate(unittest.TestCase):

    def setUp(self):
        self.gate = TaskBucketGate()

    def test_limit_boundary(self):
        self.assertEqual(MAX_TASKS, 10)
        self.assertTrue(self.gate.can_create(0))
        self.assertTrue(self.gate.can_create(9))
        self.assertFalse(self.gate.can_create(10))
        self.assertFalse(self.gate.can_create(11))

    def test_no_message_below_limit(self):
        self.assertIsNone(self.gate.status_message(9, True))
        self.assertIsNone(self.gate.status_message(3, False))

    def test_message_depends_on_completed_tasks(self):
        self.assertEqual(self.gate.status_message(10, True), CLEAR_COMPLETED_MESSAGE)
        self.assertEqual(self.gate.status_message(10, False), COMPLETE_EXISTING_MESSAGE)
        self.assertEqual(self.gate.status_message(12, False), COMPLETE_EXISTING_MESSAGE)

    def test_progress_message(self):
        self.assertEqual(self.gate.progress_message(0), "Getting started! 0 of 10 tasks planned.")
        self.assertEqual(self.gate.progress_message(3), "Building momentum! 3 of 10 tasks planned.")
        self.assertEqual(self.gate.progress_message(6), "Almost there! 6 of 10 tasks planned.")
        self.assertEqual(self.gate.progress_message(10), "Full plan ready! 10 of 10 tasks planned.")


class TestTaskBucketCheck(unittest.TestCase):

    def test_check_uses_provider(self):
        provider = Mock()
        provider.get_task_count.return_value = 10
        provider.has_completed_uncleared_tasks.return_value = True
        gate = TaskBucketGate(provider)

        status = gate.check(42)

        provider.get_task_count.assert_called_once_with(42)
        self.assertFalse(status.can_create)
        self.assertEqual(status.current_count, 10)
        self.assertEqual(status.max_limit, 10)
        self.assertTrue(status.has_completed_tasks)
        self.assertEqual(status.message, CLEAR_COMPLETED_MESSAGE)

    def test_check_reads_fresh_counts(self):
        provider = Mock()
        provider.get_task_count.side_effect = [10, 9]
        provider.has_completed_uncleared_tasks.return_value = True
        gate = TaskBucketGate(provider)

        self.assertFalse(gate.check(42).can_create)
        self.assertTrue(gate.check(42).can_create)
        self.assertEqual(provider.get_task_count.call_count, 2)

    def test_check_with_room(self):
        provider = Mock()
        provider.get_task_count.return_value = 4
        provider.has_completed_uncleared_tasks.return_value = False
        status = TaskBucketGate(provider).check(1)
        self.assertTrue(status.can_create)
        self.assertIsNone(status.message)

    def test_check_without_provider(self):
        with self.assertRaises(RuntimeError):
            TaskBucketGate().check(1)


if __name__ == "__main__":
    unittest.main()
