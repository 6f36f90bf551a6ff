#!/usr/bin/env python3
"""
(C) 2026 Joseph Tingiris (joseph.tingiris@gmail.com)

Focused CLI tests for `bin/hyprland-submaps.py`.
"""

import os
import py_compile
import subprocess
import sys
import tempfile
import unittest
from textwrap import dedent


SCRIPT = os.path.normpath(
    os.path.join(os.path.dirname(__file__), "..", "bin", "hyprland-submaps.py")
)
REPO_ROOT = os.path.normpath(os.path.join(os.path.dirname(__file__), ".."))
REFERENCE_INPUT = os.path.join(REPO_ROOT, "references", "hyprland.sample.conf")


def run_submaps(args: list[str], input_text: str = "", env: dict[str, str] | None = None) -> subprocess.CompletedProcess[bytes]:
    """Run the submap generator with args and optional stdin input."""
    cmd = [sys.executable, SCRIPT]
    cmd.extend(args)
    run_env = dict(os.environ)
    run_env.pop("HYPRLAND_SUBMAPS_DEBUG", None)
    if env:
        run_env.update(env)
    return subprocess.run(
        cmd,
        input=input_text.encode("utf-8"),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=REPO_ROOT,
        env=run_env,
    )


class HyprlandSubmapsCliTests(unittest.TestCase):
    """CLI behavior tests for hyprland-submaps."""

    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def write_config(self, text: str) -> str:
        path = os.path.join(self.tmpdir.name, "hyprland.conf")
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(dedent(text))
        return path

    def test_script_compiles(self) -> None:
        py_compile.compile(SCRIPT, doraise=True)

    def test_help_exits_0(self) -> None:
        proc = run_submaps(["--help"])
        self.assertEqual(proc.returncode, 0)
        self.assertIn("usage:", proc.stdout.decode("utf-8").lower())

    def test_missing_argument_exits_1(self) -> None:
        proc = run_submaps([])
        self.assertEqual(proc.returncode, 1)
        self.assertIn("usage:", proc.stderr.decode("utf-8").lower())
        self.assertEqual(proc.stdout, b"")

    def test_extra_argument_exits_1(self) -> None:
        path = self.write_config("bind = ALT, A, exec, a\n")
        proc = run_submaps([path, path])
        self.assertEqual(proc.returncode, 1)
        self.assertIn("usage:", proc.stderr.decode("utf-8").lower())

    def test_unreadable_file_exits_2(self) -> None:
        proc = run_submaps([os.path.join(self.tmpdir.name, "missing.conf")])
        self.assertEqual(proc.returncode, 2)
        self.assertIn("error: failed to read input", proc.stderr.decode("utf-8"))
        self.assertEqual(proc.stdout, b"")

    def test_undecodable_file_exits_2(self) -> None:
        path = os.path.join(self.tmpdir.name, "binary.conf")
        with open(path, "wb") as handle:
            handle.write(b"bind = ALT, A, exec, a\n\xff\xfe\xfd\n")
        proc = run_submaps([path])
        self.assertEqual(proc.returncode, 2)
        self.assertEqual(proc.stdout, b"")

    def test_generates_submaps_from_file(self) -> None:
        path = self.write_config(
            """
            $MOD = SUPER
            bind = $MOD, Q, exec, term
            #alias=$MOD,Apps
            """
        )
        proc = run_submaps([path])
        self.assertEqual(proc.returncode, 0, msg=proc.stderr.decode("utf-8"))
        out = proc.stdout.decode("utf-8")
        self.assertTrue(out.startswith("\nbindr=SUPER,super_l,submap,Apps\n"))
        self.assertIn("\nsubmap=Apps\n", out)
        self.assertIn("\nbind=,Q,exec,term\nbind=,Q,submap,reset\n", out)
        self.assertTrue(out.endswith("\nsubmap=reset\n"))
        self.assertEqual(proc.stderr, b"")

    def test_reads_stdin_with_dash(self) -> None:
        proc = run_submaps(["-"], "bind = SHIFT, A, exec, a\n")
        self.assertEqual(proc.returncode, 0, msg=proc.stderr.decode("utf-8"))
        self.assertIn("\nsubmap=SHIFT\n", proc.stdout.decode("utf-8"))

    def test_out_writes_file(self) -> None:
        path = self.write_config("bind = ALT, A, exec, a\n")
        out_path = os.path.join(self.tmpdir.name, "submaps.conf")
        proc = run_submaps([path, "--out", out_path])
        self.assertEqual(proc.returncode, 0, msg=proc.stderr.decode("utf-8"))
        self.assertEqual(proc.stdout, b"")
        with open(out_path, "r", encoding="utf-8") as handle:
            written = handle.read()
        self.assertIn("\nsubmap=ALT\n", written)
        self.assertEqual(written, run_submaps([path]).stdout.decode("utf-8"))

    def test_debug_writes_to_stderr_only(self) -> None:
        path = self.write_config("bind = ALT, A, exec, a\n")
        plain = run_submaps([path])
        proc = run_submaps([path, "-c", "never", "-d", "2"])
        self.assertEqual(proc.returncode, 0)
        err = proc.stderr.decode("utf-8")
        self.assertIn("[DEBUG:1:parse] 0 variables, 1 submaps", err)
        self.assertIn("[DEBUG:2:parse] line 1:", err)
        self.assertIn("[DEBUG:1:print] submap 'ALT'", err)
        self.assertEqual(proc.stdout, plain.stdout)

    def test_debug_target_filters_category(self) -> None:
        path = self.write_config("bind = ALT, A, exec, a\n")
        proc = run_submaps([path, "-c", "never", "-d", "target=print"])
        err = proc.stderr.decode("utf-8")
        self.assertIn("[DEBUG:1:print]", err)
        self.assertNotIn(":parse]", err)

    def test_debug_from_environment(self) -> None:
        path = self.write_config("bind = ALT, A, exec, a\n")
        proc = run_submaps([path, "-c", "never"], env={"HYPRLAND_SUBMAPS_DEBUG": "1"})
        self.assertEqual(proc.returncode, 0)
        self.assertIn("[DEBUG:1:print]", proc.stderr.decode("utf-8"))

    def test_reference_input_smoke(self) -> None:
        proc = run_submaps([REFERENCE_INPUT])
        self.assertEqual(proc.returncode, 0, msg=proc.stderr.decode("utf-8"))
        out = proc.stdout.decode("utf-8")
        self.assertTrue(out.startswith("\nbindl=,XF86AudioMute,exec,wpctl set-mute @DEFAULT_AUDIO_SINK@ toggle\n"))
        for alias in ("Move", "Select", "Alt", "Apps"):
            self.assertIn(f"\nsubmap={alias}\n", out)
        # hand-written resize submap is not regenerated
        self.assertNotIn("resizeactive", out)
        self.assertIn("\nbind=,R,submap,resize\n", out)
        # variables are only substituted in the modifier field
        self.assertIn("\nbind=,Q,exec,$terminal\n", out)
        self.assertIn("\nbind=,C,killactive,\n", out)
        self.assertIn("\nbindr=CTRL,control_l,submap,Select\n", out)
        self.assertIn("\nbind=CTRL,1,movetoworkspace,1\n", out)


if __name__ == "__main__":
    unittest.main()
