from __future__ import annotations

import time
import unittest
from unittest.mock import patch

import src.db as db
from src.content import read_content_tree, read_hero, read_sections
from src.content import reader
from src.errors import ReadFailure

from tests.support import TempDatabaseTestCase


class ContentReaderTests(TempDatabaseTestCase):
    def test_missing_hero_reads_as_empty_values(self):
        self.execute("DELETE FROM hero")

        hero = self.run_async(read_hero())

        self.assertEqual(hero, {"title": "", "subtitle": "", "updatedAt": None})

    def test_seeded_hero_is_served(self):
        hero = self.run_async(read_hero())

        self.assertIn("Perfection", hero["title"])
        self.assertTrue(hero["subtitle"])
        self.assertIsNotNone(hero["updatedAt"])

    def test_sections_without_payload_rows_get_defaults(self):
        self.execute("INSERT INTO sections (id, type, sort_order) VALUES ('s1', 'spotlight', 0)")
        self.execute("INSERT INTO sections (id, type, sort_order) VALUES ('g1', 'grid', 1)")

        sections = self.run_async(read_sections())

        self.assertEqual(
            sections,
            [
                {
                    "id": "s1",
                    "type": "spotlight",
                    "data": {
                        "title": "",
                        "subtext": "",
                        "mediaType": "image",
                        "media": "",
                        "image": "",
                    },
                },
                {
                    "id": "g1",
                    "type": "grid",
                    "data": {"title": "", "gridColumns": 0, "products": []},
                },
            ],
        )

    def test_image_only_spotlight_falls_back_to_image(self):
        self.execute("INSERT INTO sections (id, type, sort_order) VALUES ('s1', 'spotlight', 0)")
        self.execute(
            "INSERT INTO spotlight_data (section_id, title, subtext, image, media, media_type) "
            "VALUES ('s1', 'Winter', 'Sale', 'http://img/old.jpg', NULL, NULL)"
        )

        data = self.run_async(read_sections())[0]["data"]

        self.assertEqual(data["media"], "http://img/old.jpg")
        self.assertEqual(data["image"], "http://img/old.jpg")
        self.assertEqual(data["mediaType"], "image")

    def test_media_column_wins_over_image(self):
        self.execute("INSERT INTO sections (id, type, sort_order) VALUES ('s1', 'spotlight', 0)")
        self.execute(
            "INSERT INTO spotlight_data (section_id, title, image, media, media_type) "
            "VALUES ('s1', 'Clip', 'http://img/old.jpg', 'http://vid/new.mp4', 'video')"
        )

        data = self.run_async(read_sections())[0]["data"]

        self.assertEqual(data["media"], "http://vid/new.mp4")
        self.assertEqual(data["mediaType"], "video")

    def test_product_defaults_and_stored_false_flags(self):
        self.execute("INSERT INTO sections (id, type, sort_order) VALUES ('g1', 'grid', 0)")
        self.execute("INSERT INTO grid_data (section_id, title, grid_columns) VALUES ('g1', 'Deals', 4)")
        grid_id = self.fetchall("SELECT id FROM grid_data WHERE section_id = 'g1'")[0][0]
        self.execute(
            "INSERT INTO products (grid_id, name, old_price, new_price, image, link, badge, "
            "strike_old_price, show_old_price, sort_order) "
            "VALUES (?, 'Mouse', 50, 45.5, NULL, NULL, NULL, NULL, NULL, 0)",
            (grid_id,),
        )
        self.execute(
            "INSERT INTO products (grid_id, name, old_price, new_price, image, "
            "strike_old_price, show_old_price, sort_order) "
            "VALUES (?, 'Pad', 20, 10, 'http://img/pad.jpg', 0, 0, 1)",
            (grid_id,),
        )

        grid = self.run_async(read_sections())[0]["data"]
        mouse, pad = grid["products"]

        self.assertEqual(grid["title"], "Deals")
        self.assertEqual(grid["gridColumns"], 4)
        self.assertEqual(mouse["oldPrice"], 50.0)
        self.assertEqual(mouse["newPrice"], 45.5)
        self.assertEqual(mouse["image"], "")
        self.assertEqual(mouse["link"], "#")
        self.assertEqual(mouse["badge"], "")
        self.assertIs(mouse["strikeOldPrice"], True)
        self.assertIs(mouse["showOldPrice"], True)
        self.assertIs(pad["strikeOldPrice"], False)
        self.assertIs(pad["showOldPrice"], False)
        self.assertNotIn("sortOrder", pad)

    def test_products_are_ordered_by_sort_order_then_id(self):
        self.execute("INSERT INTO sections (id, type, sort_order) VALUES ('g1', 'grid', 0)")
        self.execute("INSERT INTO grid_data (section_id, title) VALUES ('g1', 'Deals')")
        grid_id = self.fetchall("SELECT id FROM grid_data")[0][0]
        for name, sort_order in (("c", 2), ("a", 0), ("b1", 1), ("b2", 1)):
            self.execute(
                "INSERT INTO products (grid_id, name, sort_order) VALUES (?, ?, ?)",
                (grid_id, name, sort_order),
            )

        products = self.run_async(read_sections(admin=True))[0]["data"]["products"]

        self.assertEqual([p["name"] for p in products], ["a", "b1", "b2", "c"])
        self.assertEqual([p["sortOrder"] for p in products], [0, 1, 1, 2])

    def test_sections_come_back_in_sort_order(self):
        for section_id, sort_order in (("third", 7), ("first", 0), ("second", 3)):
            self.execute(
                "INSERT INTO sections (id, type, sort_order) VALUES (?, 'spotlight', ?)",
                (section_id, sort_order),
            )

        sections = self.run_async(read_sections(admin=True))

        self.assertEqual([s["id"] for s in sections], ["first", "second", "third"])
        self.assertEqual([s["sortOrder"] for s in sections], [0, 3, 7])
        self.assertIn("createdAt", sections[0])
        self.assertIn("updatedAt", sections[0])

    def test_order_survives_out_of_order_payload_loads(self):
        for index in range(4):
            self.execute(
                "INSERT INTO sections (id, type, sort_order) VALUES (?, 'spotlight', ?)",
                (f"s{index}", index),
            )
        completed = []

        def slow_loader(cur, section_id, admin=False):
            # Earlier sections finish last.
            time.sleep(0.05 * (4 - int(section_id[1:])))
            completed.append(section_id)
            return {"title": section_id}

        with patch.dict(reader.PAYLOAD_LOADERS, {"spotlight": slow_loader}):
            sections = self.run_async(read_sections())

        self.assertEqual([s["id"] for s in sections], ["s0", "s1", "s2", "s3"])
        self.assertEqual([s["data"]["title"] for s in sections], ["s0", "s1", "s2", "s3"])
        self.assertEqual(completed[-1], "s0")

    def test_unknown_stored_type_serves_empty_data(self):
        # Rows written outside the API can bypass the type check.
        conn = self.raw_connection()
        try:
            conn.execute("PRAGMA ignore_check_constraints = ON")
            conn.execute("INSERT INTO sections (id, type, sort_order) VALUES ('x', 'carousel', 0)")
            conn.commit()
        finally:
            conn.close()

        sections = self.run_async(read_sections())

        self.assertEqual(sections, [{"id": "x", "type": "carousel", "data": {}}])

    def test_storage_error_surfaces_as_read_failure(self):
        # A directory cannot be opened as a database file.
        db.SQLITE_DB_PATH = db.SQLITE_DB_PATH.parent

        with self.assertRaises(ReadFailure):
            self.run_async(read_sections())
        with self.assertRaises(ReadFailure):
            self.run_async(read_hero())

    def test_content_tree_combines_hero_and_sections(self):
        self.execute("INSERT INTO sections (id, type, sort_order) VALUES ('s1', 'spotlight', 0)")

        tree = self.run_async(read_content_tree())

        self.assertEqual(set(tree), {"hero", "sections"})
        self.assertEqual([s["id"] for s in tree["sections"]], ["s1"])
        self.assertNotIn("sortOrder", tree["sections"][0])


if __name__ == "__main__":
    unittest.main()
