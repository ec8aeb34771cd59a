from __future__ import annotations

import unittest

from social_archiver.extract import extract_post_id, extract_reference


class TestExtractReference(unittest.TestCase):
    def test_status_url(self) -> None:
        url = "https://x.com/EvanFeigenbaum/status/2014870799321117058?s=20"
        ref = extract_reference(url)

        self.assertEqual(ref.raw_url, url)
        self.assertEqual(ref.post_id, "2014870799321117058")
        self.assertEqual(ref.handle, "EvanFeigenbaum")
        self.assertEqual(ref.host, "x.com")

    def test_first_long_run_wins(self) -> None:
        url = "https://x.com/u/status/123456789012345/photo/999999999999999999"
        self.assertEqual(extract_post_id(url), "123456789012345")

    def test_short_digit_runs_are_not_ids(self) -> None:
        ref = extract_reference("https://x.com/user2024/status/12345678901234?s=20")
        self.assertIsNone(ref.post_id)
        self.assertEqual(ref.handle, "user2024")

    def test_no_path_has_no_handle(self) -> None:
        ref = extract_reference("https://www.linkedin.com/")
        self.assertIsNone(ref.handle)
        self.assertIsNone(ref.post_id)
        self.assertEqual(ref.host, "linkedin.com")

    def test_url_without_scheme(self) -> None:
        ref = extract_reference("twitter.com/someone/status/1900000000000000000")
        self.assertEqual(ref.host, "twitter.com")
        self.assertEqual(ref.handle, "someone")
        self.assertEqual(ref.post_id, "1900000000000000000")
        self.assertEqual(ref.raw_url, "twitter.com/someone/status/1900000000000000000")

    def test_garbage_is_not_an_error(self) -> None:
        ref = extract_reference("not a url at all")
        self.assertIsNone(ref.post_id)
        self.assertEqual(ref.raw_url, "not a url at all")


if __name__ == "__main__":
    unittest.main()
