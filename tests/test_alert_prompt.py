"""
Tests for the focus check prompt and its self-answering countdown.
"""
import os
import sys

os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ['TICK_INTERVAL_SECONDS'] = '3600'

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import unittest
from unittest.mock import Mock

from focusroom.focus import (
    AlertPromptController,
    AlertResponse,
    DoubleOpenPrompt,
    StaleResponse,
)


class TestAlertPromptController(unittest.TestCase):

    def setUp(self):
        self.on_response = Mock()
        self.alerts = AlertPromptController(
            default_response=AlertResponse.DEVIATED,
            on_response=self.on_response,
        )

    def test_open_prompt(self):
        prompt = self.alerts.open("Write report")
        self.assertTrue(prompt.is_open)
        self.assertEqual(prompt.countdown, 30)
        self.assertEqual(prompt.task_name, "Write report")
        self.assertIsNone(prompt.response)

    def test_second_open_is_rejected(self):
        self.alerts.open("Write report")
        with self.assertRaises(DoubleOpenPrompt):
            self.alerts.open("Review slides")
        self.assertEqual(self.alerts.prompt.task_name, "Write report")

    def test_countdown_answers_with_default_exactly_once(self):
        self.alerts.open("Write report")
        for _ in range(29):
            self.assertIsNone(self.alerts.tick())
        self.assertTrue(self.alerts.is_open)
        self.assertEqual(self.alerts.prompt.countdown, 1)

        closed = self.alerts.tick()
        self.assertIsNotNone(closed)
        self.assertFalse(closed.is_open)
        self.assertTrue(closed.automatic)
        self.assertEqual(closed.response, AlertResponse.DEVIATED)

        for _ in range(5):
            self.assertIsNone(self.alerts.tick())
        self.on_response.assert_called_once()
        self.assertEqual(self.on_response.call_args[0][0].response, AlertResponse.DEVIATED)

    def test_user_answer_closes_prompt(self):
        self.alerts.open("Write report")
        self.alerts.tick()
        answered = self.alerts.respond(AlertResponse.FOCUSED)
        self.assertFalse(answered.is_open)
        self.assertFalse(answered.automatic)
        self.assertEqual(answered.response, AlertResponse.FOCUSED)
        self.assertEqual(answered.countdown, 29)

        for _ in range(40):
            self.alerts.tick()
        self.on_response.assert_called_once()

    def test_late_answer_does_not_overwrite(self):
        self.alerts.open("Write report")
        for _ in range(30):
            self.alerts.tick()
        with self.assertRaises(StaleResponse):
            self.alerts.respond(AlertResponse.FOCUSED)
        self.assertEqual(self.alerts.prompt.response, AlertResponse.DEVIATED)
        self.on_response.assert_called_once()

    def test_respond_without_prompt(self):
        with self.assertRaises(StaleResponse):
            self.alerts.respond(AlertResponse.FOCUSED)

    def test_reopen_after_close_keeps_history(self):
        self.alerts.open("First")
        self.alerts.respond(AlertResponse.FOCUSED)
        self.alerts.open("Second")
        for _ in range(30):
            self.alerts.tick()
        self.assertEqual(
            [(p.task_name, p.response) for p in self.alerts.history],
            [("First", AlertResponse.FOCUSED), ("Second", AlertResponse.DEVIATED)],
        )

    def test_callback_failure_still_closes(self):
        self.on_response.side_effect = RuntimeError("boom")
        self.alerts.open("Write report")
        self.alerts.respond(AlertResponse.FOCUSED)
        self.assertFalse(self.alerts.is_open)

    def test_rejects_non_positive_countdown(self):
        with self.assertRaises(ValueError):
            AlertPromptController(countdown_seconds=0)


if __name__ == "__main__":
    unittest.main()
