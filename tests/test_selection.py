import random
import unittest
from types import SimpleNamespace

from weaponbot.errors import InsufficientPoolError, PreconditionViolation
from weaponbot.selection import (
    anonymous_assignment,
    assignment_error,
    bind_participants,
    human_members,
    player_limit_error,
    sample_weapons,
)

POOL = ["Splattershot", "Octobrush", "Splat Roller", "Tri-Stringer", "Splat Dualies"]


class SampleWeaponsTests(unittest.TestCase):
    def test_draws_distinct_weapons_from_pool(self) -> None:
        rng = random.Random(4)
        for count in range(len(POOL) + 1):
            drawn = sample_weapons(POOL, count, rng)
            self.assertEqual(len(drawn), count)
            self.assertEqual(len(set(drawn)), count)
            self.assertTrue(set(drawn) <= set(POOL))

    def test_oversized_draw_fails(self) -> None:
        with self.assertRaises(InsufficientPoolError) as ctx:
            sample_weapons(POOL, len(POOL) + 1)
        self.assertEqual(ctx.exception.available, len(POOL))

    def test_negative_draw_fails(self) -> None:
        with self.assertRaises(PreconditionViolation):
            sample_weapons(POOL, -1)


class BindingTests(unittest.TestCase):
    def test_pairs_positionally(self) -> None:
        assignment = bind_participants([10, 20], ["Octobrush", "Splattershot"])
        self.assertEqual([(e.participant_id, e.weapon) for e in assignment], [(10, "Octobrush"), (20, "Splattershot")])

    def test_length_mismatch_fails(self) -> None:
        with self.assertRaises(PreconditionViolation):
            bind_participants([10], ["Octobrush", "Splattershot"])

    def test_anonymous_assignment(self) -> None:
        assignment = anonymous_assignment(["Octobrush"])
        self.assertIsNone(assignment[0].participant_id)

    def test_human_members_skips_bots(self) -> None:
        channel = SimpleNamespace(members=[SimpleNamespace(id=1, bot=False), SimpleNamespace(id=2, bot=True)])
        self.assertEqual([m.id for m in human_members(channel)], [1])


class AssignmentErrorTests(unittest.TestCase):
    def test_player_limit(self) -> None:
        self.assertIsNone(player_limit_error(10, 10))
        self.assertEqual(player_limit_error(11, 10), "Draws support at most 10 players (11 are in the channel).")

    def test_empty_pool(self) -> None:
        self.assertIn("`?clear`", assignment_error(2, 0, prefix="?"))

    def test_empty_filtered_pool(self) -> None:
        self.assertEqual(assignment_error(2, 0, "Brush"), "Every Brush weapon is excluded or none exist.")

    def test_too_many_players(self) -> None:
        self.assertIn("Only 3 weapons", assignment_error(4, 3))

    def test_valid_draw(self) -> None:
        self.assertIsNone(assignment_error(3, 3))


if __name__ == "__main__":
    unittest.main()
