# tests/test_normalize.py
from __future__ import annotations

import unittest

from social_archiver.extract import extract_reference
from social_archiver.normalize import normalize, normalize_post
from social_archiver.retrieval_schema import RawFinding


_URL = "https://x.com/user/status/2014870799321117058?s=20"


class TestNormalize(unittest.TestCase):
    def test_fills_defaults(self) -> None:
        ref = extract_reference(_URL)
        finding = RawFinding(platform="  ", content="", keywords=[])

        post = normalize(ref, finding, "")

        self.assertEqual(post.platform, "Unknown")
        self.assertEqual(post.content, "Could not extract content.")
        self.assertEqual(post.keywords, ())
        self.assertEqual(post.original_link, _URL)
        self.assertIsNone(post.found_status_id)

    def test_carries_fields_through(self) -> None:
        ref = extract_reference(_URL)
        finding = RawFinding(
            platform="Twitter",
            content="hello",
            keywords=["b", "a", "b"],
            foundStatusId="2014870799321117058",
        )

        post = normalize(ref, finding, "✅ [Verified]: hello")

        self.assertEqual(post.platform, "Twitter")
        self.assertEqual(post.content, "✅ [Verified]: hello")
        self.assertEqual(post.keywords, ("b", "a", "b"))
        self.assertEqual(post.found_status_id, "2014870799321117058")

    def test_keywords_pass_through_unchanged(self) -> None:
        ref = extract_reference(_URL)
        finding = RawFinding(platform="Twitter", content="x", keywords=[" #Launch ", "", "ai"])

        post = normalize(ref, finding, "x")

        self.assertEqual(post.keywords, (" #Launch ", "", "ai"))

    def test_normalize_post_is_idempotent(self) -> None:
        ref = extract_reference(_URL)
        finding = RawFinding(platform="Twitter", content="x", keywords=[" a ", ""])
        post = normalize(ref, finding, "x")

        once = normalize_post(post)
        twice = normalize_post(once)

        self.assertEqual(once, post)
        self.assertEqual(twice, once)

    def test_normalize_post_accepts_payload(self) -> None:
        post = normalize_post(
            {
                "platform": None,
                "content": "",
                "keywords": "solo",
                "originalLink": _URL,
                "foundStatusId": 2014870799321117058,
            }
        )

        self.assertEqual(post.platform, "Unknown")
        self.assertEqual(post.content, "Could not extract content.")
        self.assertEqual(post.keywords, ("solo",))
        self.assertEqual(post.original_link, _URL)
        self.assertEqual(post.found_status_id, "2014870799321117058")

    def test_normalize_post_requires_link(self) -> None:
        with self.assertRaises(ValueError):
            normalize_post({"platform": "Twitter"})


if __name__ == "__main__":
    unittest.main()
