import unittest
from datetime import timedelta

from weaponbot.embeds import (
    EXCLUDED_COLOR,
    NUMBER_EMOJIS,
    REROLL_EMOJI,
    build_assignment_embed,
    build_help_embed,
    build_weapon_list_embeds,
    index_label,
    weapon_from_embed,
)
from weaponbot.models import AssignmentEntry

ASSIGNMENT = (AssignmentEntry("Splattershot", 11), AssignmentEntry("Octobrush", 22))


class AssignmentEmbedTests(unittest.TestCase):
    def test_fresh_draw(self) -> None:
        embed = build_assignment_embed(ASSIGNMENT, 3, cooldown=timedelta(seconds=20))
        self.assertEqual(embed.title, "🎲 Random Weapon Draw")
        self.assertEqual(
            embed.description,
            "1️⃣ <@11> → **Splattershot**\n2️⃣ <@22> → **Octobrush**",
        )
        self.assertIn("Players: 2 | Excluded: 3", embed.footer.text)
        self.assertIn(f"{REROLL_EMOJI} to reroll (within 20s)", embed.footer.text)

    def test_reroll_drops_hints(self) -> None:
        embed = build_assignment_embed(ASSIGNMENT, 0, weapon_type="Brush", is_reroll=True)
        self.assertEqual(embed.title, "🎲 Random Weapon Draw (Brush) (Reroll)")
        self.assertEqual(embed.footer.text, "Players: 2 | Excluded: 0")

    def test_expired_keeps_exclusion_hint(self) -> None:
        embed = build_assignment_embed(ASSIGNMENT, 0, is_expired=True)
        self.assertNotIn(REROLL_EMOJI, embed.footer.text)
        self.assertTrue(embed.footer.text.endswith("React with a number to exclude"))

    def test_anonymous_lines(self) -> None:
        embed = build_assignment_embed((AssignmentEntry("Splattershot"),), 0)
        self.assertEqual(embed.description, "1️⃣ → **Splattershot**")

    def test_labels_past_ten(self) -> None:
        self.assertEqual(index_label(9), NUMBER_EMOJIS[9])
        self.assertEqual(index_label(10), "**11.**")

    def test_weapon_from_embed(self) -> None:
        embed = build_assignment_embed(ASSIGNMENT, 0)
        self.assertEqual(weapon_from_embed(embed, 1), "Octobrush")
        self.assertIsNone(weapon_from_embed(embed, 2))
        self.assertIsNone(weapon_from_embed(None, 0))


class ListEmbedTests(unittest.TestCase):
    def test_pages_of_thirty(self) -> None:
        weapons = [f"Weapon {n}" for n in range(65)]
        embeds = build_weapon_list_embeds("All", weapons, color=EXCLUDED_COLOR)
        self.assertEqual(len(embeds), 3)
        self.assertEqual(embeds[1].title, "All (continued)")
        self.assertTrue(embeds[2].description.startswith("**61.** Weapon 60"))
        self.assertEqual(embeds[0].footer.text, "Total: 65")

    def test_help_lists_commands_and_types(self) -> None:
        embed = build_help_embed("?", ["Shooter", "Brush"], cooldown=timedelta(seconds=45))
        names = [field.name for field in embed.fields]
        self.assertIn("`?random [type]`", names)
        self.assertIn("45 seconds", embed.fields[-2].value)
        self.assertEqual(embed.fields[-1].value, "Shooter, Brush")


if __name__ == "__main__":
    unittest.main()
