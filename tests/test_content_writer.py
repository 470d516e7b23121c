from __future__ import annotations

import sqlite3
import unittest
from unittest.mock import patch

from src.content import read_content_tree, read_sections, replace_content_tree
from src.errors import PersistenceFailure, ValidationFailure

from tests.support import TempDatabaseTestCase


def _tree(*sections, title="Hello", subtitle="World"):
    return {"hero": {"title": title, "subtitle": subtitle}, "sections": list(sections)}


def _grid(section_id, *product_names, title="Deals"):
    return {
        "id": section_id,
        "type": "grid",
        "data": {
            "title": title,
            "gridColumns": 3,
            "products": [
                {"name": name, "oldPrice": 10, "newPrice": 8, "image": f"http://img/{name}.jpg"}
                for name in product_names
            ],
        },
    }


def _spotlight(section_id, title="Banner"):
    return {
        "id": section_id,
        "type": "spotlight",
        "data": {"title": title, "subtext": "Text", "mediaType": "image", "media": "http://img"},
    }


class ReplaceContentTreeTests(TempDatabaseTestCase):
    def test_spotlight_save_is_read_back(self):
        result = self.run_async(replace_content_tree(_tree(_spotlight("s1", title="A"))))

        self.assertEqual(
            result,
            {"success": True, "message": "All data saved successfully", "sections": 1, "products": 0},
        )
        tree = self.run_async(read_content_tree())
        self.assertEqual(tree["hero"]["title"], "Hello")
        self.assertEqual(tree["hero"]["subtitle"], "World")
        self.assertEqual(
            tree["sections"],
            [
                {
                    "id": "s1",
                    "type": "spotlight",
                    "data": {
                        "title": "A",
                        "subtext": "Text",
                        "mediaType": "image",
                        "media": "http://img",
                        "image": "http://img",
                    },
                }
            ],
        )

    def test_save_preserves_section_and_product_order(self):
        payload = _tree(
            _grid("g2", "z", "y", "x"),
            _spotlight("s1"),
            _grid("g1", "first"),
        )

        self.run_async(replace_content_tree(payload))
        sections = self.run_async(read_sections(admin=True))

        self.assertEqual([s["id"] for s in sections], ["g2", "s1", "g1"])
        self.assertEqual([s["sortOrder"] for s in sections], [0, 1, 2])
        products = sections[0]["data"]["products"]
        self.assertEqual([p["name"] for p in products], ["z", "y", "x"])
        self.assertEqual([p["sortOrder"] for p in products], [0, 1, 2])

    def test_caller_sort_order_is_ignored(self):
        first = _spotlight("s1")
        first["sortOrder"] = 9
        second = _spotlight("s2")
        second["sortOrder"] = 0

        self.run_async(replace_content_tree(_tree(first, second)))
        sections = self.run_async(read_sections(admin=True))

        self.assertEqual([(s["id"], s["sortOrder"]) for s in sections], [("s1", 0), ("s2", 1)])

    def test_replace_leaves_no_orphans(self):
        self.run_async(replace_content_tree(_tree(_grid("g1", "a", "b"), _spotlight("s1"))))
        self.run_async(replace_content_tree(_tree(_grid("g9", "only"))))

        self.assertEqual(self.count_rows("sections"), 1)
        self.assertEqual(self.count_rows("spotlight_data"), 0)
        self.assertEqual(self.count_rows("grid_data"), 1)
        self.assertEqual(self.count_rows("products"), 1)

        self.run_async(replace_content_tree(_tree()))

        for table in ("sections", "spotlight_data", "grid_data", "products"):
            self.assertEqual(self.count_rows(table), 0, table)
        self.assertEqual(self.count_rows("hero"), 1)

    def test_missing_section_ids_are_generated(self):
        spotlight = _spotlight(None)
        del spotlight["id"]

        self.run_async(replace_content_tree(_tree(spotlight)))

        section_id = self.fetchall("SELECT id FROM sections")[0][0]
        self.assertTrue(section_id.startswith("sec_"))

    def test_storage_failure_mid_replace_keeps_previous_tree(self):
        self.run_async(replace_content_tree(_tree(_grid("g1", "keep"), title="Before")))
        before = self.run_async(read_content_tree())

        with patch(
            "src.content.writer.insert_product",
            side_effect=sqlite3.OperationalError("disk I/O error"),
        ):
            with self.assertRaises(PersistenceFailure):
                self.run_async(
                    replace_content_tree(_tree(_spotlight("s1"), _grid("g2", "lost"), title="After"))
                )

        self.assertEqual(self.run_async(read_content_tree()), before)

    def test_invalid_payloads_are_rejected_before_writing(self):
        self.run_async(replace_content_tree(_tree(_spotlight("s1"), title="Stable")))
        before = self.run_async(read_content_tree())

        invalid_payloads = [
            {"sections": []},
            {"hero": {"title": "x"}, "sections": {"not": "a list"}},
            {"hero": {"title": "x"}, "sections": [{"id": "a", "data": {}}]},
            {"hero": {"title": "x"}, "sections": [{"id": "a", "type": "carousel"}]},
            _tree(_spotlight("dup"), _grid("dup")),
            _tree(_grid("g1", "neg") | {"data": {"products": [{"name": "n", "oldPrice": -1}]}}),
            _tree(_grid("g1", "huge") | {"data": {"products": [{"name": "n", "oldPrice": 1e30}]}}),
            _tree(_grid("g1", "wide") | {"data": {"gridColumns": 2**70}}),
            ["not", "an", "object"],
        ]
        for payload in invalid_payloads:
            with self.subTest(payload=payload):
                with self.assertRaises(ValidationFailure) as ctx:
                    self.run_async(replace_content_tree(payload))
                self.assertEqual(ctx.exception.kind, "validation")

        self.assertEqual(self.run_async(read_content_tree()), before)

    def test_null_hero_subtitle_is_stored_empty(self):
        self.run_async(replace_content_tree(_tree(subtitle=None)))

        hero = self.run_async(read_content_tree())["hero"]

        self.assertEqual(hero["subtitle"], "")


if __name__ == "__main__":
    unittest.main()
