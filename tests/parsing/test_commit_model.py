import unittest

from release_changelog.parsing.commit_model import RawCommitRecord, StructuredCommit


class TestRawCommitRecord(unittest.TestCase):
    def test_from_text_splits_lines(self) -> None:
        record = RawCommitRecord.from_text("abc123\nfix(a): b\nline one\nline two")
        self.assertEqual(record.hash, "abc123")
        self.assertEqual(record.subject, "fix(a): b")
        self.assertEqual(record.body_lines, ["line one", "line two"])
        self.assertEqual(record.text, "abc123\nfix(a): b\nline one\nline two")

    def test_from_text_rejects_blank_and_short_blocks(self) -> None:
        self.assertIsNone(RawCommitRecord.from_text(""))
        self.assertIsNone(RawCommitRecord.from_text("   \n"))
        self.assertIsNone(RawCommitRecord.from_text("abc123"))


class TestStructuredCommit(unittest.TestCase):
    def test_defaults(self) -> None:
        commit = StructuredCommit(hash="abc", type="fix", subject="x")
        self.assertIsNone(commit.component)
        self.assertEqual(commit.closes, [])
        self.assertIsNone(commit.breaking)
        self.assertEqual(commit.body, "")


if __name__ == "__main__":
    unittest.main()
