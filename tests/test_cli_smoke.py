from __future__ import annotations

import json
import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path


def _run_cli(*args: str, env_updates: dict[str, str] | None = None) -> subprocess.CompletedProcess:
    repo_root = Path(__file__).resolve().parents[1]

    env = dict(os.environ)
    env.pop("OPENAI_API_KEY", None)
    env.pop("SHEET_SCRIPT_URL", None)
    env.update(env_updates or {})

    existing_pp = env.get("PYTHONPATH", "")
    env["PYTHONPATH"] = (
        f"{repo_root}{os.pathsep}{existing_pp}" if existing_pp else str(repo_root)
    )

    return subprocess.run(
        [sys.executable, "-m", "social_archiver", *args],
        cwd=repo_root,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


class TestCLISmoke(unittest.TestCase):
    def test_analyze_offline_cli(self) -> None:
        proc = _run_cli(
            "analyze",
            "https://x.com/user/status/2014870799321117058?s=20",
            "--offline",
            env_updates={"PYTHONIOENCODING": "utf-8"},
        )

        self.assertEqual(proc.returncode, 0, msg=proc.stderr)
        record = json.loads(proc.stdout)
        self.assertEqual(record["platform"], "Twitter")
        self.assertTrue(record["content"].startswith("✅ [Verified]: "))
        self.assertEqual(record["originalLink"], "https://x.com/user/status/2014870799321117058?s=20")
        self.assertEqual(record["foundStatusId"], "2014870799321117058")

    def test_offline_save_reads_sink_url_from_environment(self) -> None:
        proc = _run_cli(
            "analyze",
            "https://x.com/user/status/2014870799321117058",
            "--offline",
            "--save",
            env_updates={
                "PYTHONIOENCODING": "utf-8",
                "SHEET_SCRIPT_URL": "http://127.0.0.1:9/exec",
            },
        )

        self.assertEqual(proc.returncode, 3, msg=proc.stderr)
        self.assertIn("Failed to save to Google Sheet", proc.stderr)
        self.assertNotIn("SHEET_SCRIPT_URL", proc.stderr)
        self.assertEqual(json.loads(proc.stdout)["foundStatusId"], "2014870799321117058")

    def test_offline_save_without_sink_url_exits_2(self) -> None:
        proc = _run_cli(
            "analyze",
            "https://x.com/user/status/2014870799321117058",
            "--offline",
            "--save",
            env_updates={"PYTHONIOENCODING": "utf-8"},
        )

        self.assertEqual(proc.returncode, 2)
        self.assertIn("SHEET_SCRIPT_URL", proc.stderr)

    def test_missing_api_key_exits_2(self) -> None:
        proc = _run_cli("analyze", "https://x.com/user/status/2014870799321117058")

        self.assertEqual(proc.returncode, 2)
        self.assertIn("OPENAI_API_KEY", proc.stderr)
        self.assertEqual(proc.stdout, "")

    def test_analyze_writes_audit_log_on_config_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            log_path = Path(td) / "audit.log"
            missing_cfg = Path(td) / "missing_config.yaml"

            proc = _run_cli(
                "analyze",
                "https://x.com/user/status/2014870799321117058",
                "--config",
                str(missing_cfg),
                "--log",
                str(log_path),
            )

            self.assertEqual(proc.returncode, 2, msg=proc.stderr)
            self.assertTrue(log_path.exists())

            events: list[str] = []
            for ln in log_path.read_text(encoding="utf-8").splitlines():
                if not ln.strip():
                    continue
                ev = json.loads(ln).get("event")
                if isinstance(ev, str):
                    events.append(ev)

            self.assertIn("analyze_command_started", events)
            self.assertIn("analyze_command_failed", events)


if __name__ == "__main__":
    unittest.main()
