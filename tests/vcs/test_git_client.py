import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

from release_changelog.parsing.commit_model import RawCommitRecord
from release_changelog.vcs.git_client import (
    GitClient,
    GitError,
    TagLookupError,
    split_log_output,
)


class DummyProc(SimpleNamespace):
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""


LOG_OUTPUT = (
    "1111111111111111111111111111111111111111\n"
    "fix(core): handle null\n"
    "Closes #12\n"
    "\n"
    "==END==\n"
    "2222222222222222222222222222222222222222\n"
    "feat(ui): add widget\n"
    "\n"
    "==END==\n"
)


class TestSplitLogOutput(unittest.TestCase):
    def test_splits_records(self) -> None:
        records = split_log_output(LOG_OUTPUT)
        self.assertEqual(
            records,
            [
                RawCommitRecord(
                    hash="1111111111111111111111111111111111111111",
                    subject="fix(core): handle null",
                    body_lines=["Closes #12"],
                ),
                RawCommitRecord(
                    hash="2222222222222222222222222222222222222222",
                    subject="feat(ui): add widget",
                    body_lines=[],
                ),
            ],
        )

    def test_empty_output(self) -> None:
        self.assertEqual(split_log_output(""), [])
        self.assertEqual(split_log_output("\n"), [])

    def test_missing_final_newline(self) -> None:
        records = split_log_output("abc\nfix(a): b\n\n==END==")
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].subject, "fix(a): b")


class TestGitClientCommands(unittest.TestCase):
    def test_run_raises_on_failure(self) -> None:
        with patch("release_changelog.vcs.git_client.subprocess.run") as mock_run:
            mock_run.return_value = DummyProc(returncode=128, stdout="", stderr="fatal: boom\n")
            client = GitClient(Path("/repo"))
            with self.assertRaises(GitError) as ctx:
                client._run(["status"])
            self.assertEqual(str(ctx.exception), "fatal: boom")
            args, kwargs = mock_run.call_args
            self.assertEqual(args[0], ["git", "status"])
            self.assertEqual(kwargs["cwd"], Path("/repo"))

    def test_previous_tag(self) -> None:
        def fake_run(self, args, check=True):
            self_args.append(args)
            return DummyProc(returncode=0, stdout="v1.1.0\n", stderr="")

        self_args = []
        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            self.assertEqual(GitClient(Path("/repo")).previous_tag(), "v1.1.0")
        self.assertEqual(self_args, [["describe", "--tags", "--abbrev=0"]])

    def test_previous_tag_without_tags(self) -> None:
        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.return_value = DummyProc(
                returncode=128, stdout="", stderr="fatal: No names found, cannot describe anything."
            )
            with self.assertRaises(TagLookupError) as ctx:
                GitClient(Path("/repo")).previous_tag()
        self.assertIsInstance(ctx.exception, GitError)
        self.assertIn("No names found", str(ctx.exception))

    def test_is_clean(self) -> None:
        cases = [((0, 0), True), ((1, 0), False), ((0, 1), False)]
        for codes, expected in cases:
            results = iter(codes)
            with patch.object(GitClient, "_run", autospec=True) as mock_run:
                mock_run.side_effect = lambda self, args, check=True: DummyProc(returncode=next(results))
                self.assertEqual(GitClient(Path("/repo")).is_clean(), expected)

    def test_release_commands(self) -> None:
        calls = []

        def fake_run(self, args, check=True):
            calls.append(args)
            return DummyProc(returncode=0)

        with patch.object(GitClient, "_run", autospec=True) as mock_run:
            mock_run.side_effect = fake_run
            client = GitClient(Path("/repo"))
            client.stage_all()
            client.commit("chore(release): v1.2.0")
            client.tag("v1.2.0")
            client.tag("v1.2.1", force=False)
            client.push_with_tags()

        self.assertEqual(
            calls,
            [
                ["add", "-A"],
                ["commit", "-m", "chore(release): v1.2.0"],
                ["tag", "-f", "v1.2.0"],
                ["tag", "v1.2.1"],
                ["push", "origin", "HEAD", "--tags"],
            ],
        )

    def test_find_repo_root(self) -> None:
        import tempfile

        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / ".git").mkdir()
            nested = root / "a" / "b"
            nested.mkdir(parents=True)
            self.assertEqual(GitClient.find_repo_root(nested), root)


class TestFetchHistory(unittest.IsolatedAsyncioTestCase):
    def make_process(self, returncode, stdout=b"", stderr=b""):
        process = SimpleNamespace(returncode=returncode)
        process.communicate = AsyncMock(return_value=(stdout, stderr))
        return process

    async def test_fetch_since_tag(self) -> None:
        process = self.make_process(0, LOG_OUTPUT.encode("utf-8"))
        with patch(
            "release_changelog.vcs.git_client.asyncio.create_subprocess_exec",
            new=AsyncMock(return_value=process),
        ) as mock_exec:
            records = await GitClient(Path("/repo")).fetch_history("^fix|^feat", "v1.0.0")

        self.assertEqual([r.subject for r in records], ["fix(core): handle null", "feat(ui): add widget"])
        args, kwargs = mock_exec.call_args
        self.assertEqual(
            list(args),
            ["git", "log", "--grep=^fix|^feat", "-E", "--format=%H%n%s%n%b%n==END==", "v1.0.0..HEAD"],
        )
        self.assertEqual(kwargs["cwd"], Path("/repo"))

    async def test_fetch_full_history(self) -> None:
        process = self.make_process(0, b"")
        with patch(
            "release_changelog.vcs.git_client.asyncio.create_subprocess_exec",
            new=AsyncMock(return_value=process),
        ) as mock_exec:
            records = await GitClient(Path("/repo")).fetch_history("BREAKING", None)
        self.assertEqual(records, [])
        self.assertEqual(mock_exec.call_args[0][-1], "HEAD")

    async def test_fetch_failure_is_soft(self) -> None:
        process = self.make_process(128, b"", b"fatal: bad revision")
        with patch(
            "release_changelog.vcs.git_client.asyncio.create_subprocess_exec",
            new=AsyncMock(return_value=process),
        ):
            with self.assertLogs("release_changelog.vcs.git_client", level="WARNING") as logs:
                records = await GitClient(Path("/repo")).fetch_history("^fix", "nope")
        self.assertEqual(records, [])
        self.assertIn("bad revision", logs.output[0])


if __name__ == "__main__":
    unittest.main()
