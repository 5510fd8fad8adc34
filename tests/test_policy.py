import unittest
from datetime import timedelta

from weaponbot.models import MessageState
from weaponbot.policy import (
    MessagePhase,
    RerollOutcome,
    decide_reroll,
    format_seconds,
    message_phase,
    rejection_message,
)

from fakes import FakeClock

COOLDOWN = timedelta(seconds=20)


class RerollPolicyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.state = MessageState(message_id=1, created_at=self.clock())

    def test_fresh_message_is_accepted(self) -> None:
        decision = decide_reroll(self.state, self.clock(), COOLDOWN)
        self.assertTrue(decision.accepted)
        self.assertTrue(decision.clear_affordance)

    def test_boundary_is_still_accepted(self) -> None:
        self.clock.advance(seconds=20)
        self.assertEqual(message_phase(self.state, self.clock(), COOLDOWN), MessagePhase.ACTIVE)
        self.assertTrue(decide_reroll(self.state, self.clock(), COOLDOWN).accepted)

    def test_past_boundary_is_expired(self) -> None:
        self.clock.advance(seconds=20, milliseconds=1)
        decision = decide_reroll(self.state, self.clock(), COOLDOWN)
        self.assertEqual(decision.outcome, RerollOutcome.EXPIRED)
        self.assertTrue(decision.clear_affordance)

    def test_missing_record(self) -> None:
        decision = decide_reroll(None, self.clock(), COOLDOWN)
        self.assertEqual(decision.outcome, RerollOutcome.NO_RECORD)
        self.assertTrue(decision.clear_affordance)

    def test_consumed_wins_over_expired(self) -> None:
        consumed = MessageState(message_id=1, created_at=self.clock(), rerolled=True)
        self.clock.advance(minutes=5)
        decision = decide_reroll(consumed, self.clock(), COOLDOWN)
        self.assertEqual(decision.outcome, RerollOutcome.ALREADY_USED)
        self.assertFalse(decision.clear_affordance)

    def test_rejection_messages(self) -> None:
        self.assertIn("can't be rerolled", rejection_message(RerollOutcome.NO_RECORD, COOLDOWN))
        self.assertIn("only be rerolled once", rejection_message(RerollOutcome.ALREADY_USED, COOLDOWN))
        self.assertIn("first 20 seconds", rejection_message(RerollOutcome.EXPIRED, COOLDOWN))
        self.assertIsNone(rejection_message(RerollOutcome.ACCEPTED, COOLDOWN))

    def test_format_seconds(self) -> None:
        self.assertEqual(format_seconds(timedelta(seconds=20)), "20")
        self.assertEqual(format_seconds(timedelta(milliseconds=1500)), "1.5")


if __name__ == "__main__":
    unittest.main()
