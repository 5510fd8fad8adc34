import tempfile
import unittest
from pathlib import Path

from weaponbot.catalog import catalog_from_mapping
from weaponbot.errors import UnknownWeaponTypeError
from weaponbot.repository import WeaponRepository

CATALOG = catalog_from_mapping(
    {
        "weapons": {
            "Shooter": ["Splattershot", "Splattershot Jr."],
            "Brush": ["Octobrush", "Inkbrush", "Painbrush"],
        }
    }
)


class WeaponRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.repository = WeaponRepository.from_path(Path(self._tmp.name) / "nested" / "weapons.db", CATALOG)
        self.assertEqual(self.repository.initialize(), 5)

    def tearDown(self) -> None:
        self.repository.dispose()
        self._tmp.cleanup()

    def test_initialize_only_inserts_missing_rows(self) -> None:
        self.assertEqual(self.repository.initialize(), 0)
        self.assertEqual(self.repository.stats(), {"total": 5, "enabled": 5, "disabled": 0})

    def test_lists_are_sorted_and_filtered(self) -> None:
        self.assertEqual(self.repository.enabled_weapons("Brush"), ["Inkbrush", "Octobrush", "Painbrush"])
        self.assertEqual(len(self.repository.enabled_weapons()), 5)
        self.assertEqual(self.repository.disabled_weapons(), [])

    def test_unknown_type_filter_fails(self) -> None:
        with self.assertRaises(UnknownWeaponTypeError):
            self.repository.enabled_weapons("Bow")

    def test_toggle_single_weapon(self) -> None:
        result = self.repository.set_enabled("Octobrush", False)
        self.assertTrue(result.success)
        self.assertEqual(self.repository.disabled_weapons(), ["Octobrush"])
        self.assertNotIn("Octobrush", self.repository.enabled_weapons())

        again = self.repository.set_enabled("Octobrush", False)
        self.assertFalse(again.success)
        self.assertEqual(again.message, "That weapon is already excluded.")

        self.assertTrue(self.repository.set_enabled("Octobrush", True).success)
        self.assertEqual(
            self.repository.set_enabled("Octobrush", True).message,
            "That weapon isn't on the exclusion list.",
        )

    def test_unknown_weapon(self) -> None:
        result = self.repository.set_enabled("Stamper", False)
        self.assertFalse(result.success)
        self.assertEqual(result.message, "That weapon doesn't exist.")

    def test_toggle_weapon_type(self) -> None:
        self.repository.set_enabled("Inkbrush", False)
        result = self.repository.set_enabled_for_type("Brush", False)
        self.assertTrue(result.success)
        self.assertEqual(result.count, 2)
        self.assertEqual(self.repository.enabled_weapons("Brush"), [])

        again = self.repository.set_enabled_for_type("Brush", False)
        self.assertFalse(again.success)
        self.assertEqual(again.message, "Every Brush weapon is already excluded.")

        missing = self.repository.set_enabled_for_type("Bow", False)
        self.assertEqual(missing.message, "That weapon type doesn't exist.")

    def test_enable_all(self) -> None:
        self.repository.set_enabled_for_type("Shooter", False)
        self.assertEqual(self.repository.enable_all(), 2)
        self.assertEqual(self.repository.enable_all(), 0)
        self.assertEqual(self.repository.stats()["disabled"], 0)


class AsyncFacadeTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.repository = WeaponRepository("sqlite://", CATALOG)

    async def asyncTearDown(self) -> None:
        self.repository.dispose()

    async def test_async_calls_share_the_in_memory_database(self) -> None:
        result = await self.repository.set_eligible("Painbrush", False)
        self.assertTrue(result.success)
        self.assertEqual(await self.repository.list_disabled(), ["Painbrush"])
        self.assertNotIn("Painbrush", await self.repository.list_enabled("Brush"))
        type_result = await self.repository.set_eligible_for_type("Brush", True)
        self.assertEqual(type_result.count, 1)
        self.assertEqual(await self.repository.reset_all_eligible(), 0)


if __name__ == "__main__":
    unittest.main()
