from __future__ import annotations

import dataclasses
import unittest

from social_archiver.post import AnalyzedPost


def _post() -> AnalyzedPost:
    return AnalyzedPost(
        platform="Twitter",
        content="✅ [Verified]: hello",
        keywords=("a", "b"),
        original_link="https://x.com/user/status/2014870799321117058",
        found_status_id="2014870799321117058",
    )


class TestAnalyzedPost(unittest.TestCase):
    def test_is_immutable(self) -> None:
        post = _post()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            post.content = "changed"  # type: ignore[misc]

    def test_keywords_are_frozen_on_construction(self) -> None:
        source = ["a", "b"]
        post = AnalyzedPost(
            platform="Twitter",
            content="x",
            keywords=source,  # type: ignore[arg-type]
            original_link="https://x.com/user/status/2014870799321117058",
        )
        source.append("c")

        self.assertEqual(post.keywords, ("a", "b"))

    def test_edits_return_new_records(self) -> None:
        post = _post()

        edited = post.with_platform("X").with_content("edited").with_keyword(0, "z")
        edited = edited.add_keyword().remove_keyword(1)

        self.assertEqual(post.keywords, ("a", "b"))
        self.assertEqual(edited.platform, "X")
        self.assertEqual(edited.content, "edited")
        self.assertEqual(edited.keywords, ("z", "new-tag"))
        self.assertEqual(edited.original_link, post.original_link)

    def test_bad_keyword_index(self) -> None:
        with self.assertRaises(IndexError):
            _post().remove_keyword(5)

    def test_payload_uses_sheet_keys(self) -> None:
        self.assertEqual(
            _post().to_payload(),
            {
                "platform": "Twitter",
                "content": "✅ [Verified]: hello",
                "keywords": ["a", "b"],
                "originalLink": "https://x.com/user/status/2014870799321117058",
                "foundStatusId": "2014870799321117058",
            },
        )


if __name__ == "__main__":
    unittest.main()
