#!/usr/bin/env python3
"""Run the unittest suite the way CI does (headless Qt)."""
from __future__ import annotations

import argparse
import os
import subprocess
import sys


def run(cmd: list[str], env: dict[str, str]) -> int:
    print("$", " ".join(cmd))
    return subprocess.run(cmd, check=False, env=env).returncode


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run masonrygrid checks")
    parser.add_argument("-k", "--pattern", default="test_*.py", help="Test module glob")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    env = dict(os.environ)
    # The native glue tests create widgets; never open real windows here.
    env.setdefault("QT_QPA_PLATFORM", "offscreen")

    cmd = [sys.executable, "-m", "unittest", "discover", "-s", "tests", "-p", args.pattern]
    if args.verbose:
        cmd.append("-v")
    code = run(cmd, env)
    if code != 0:
        print("\n❌ dev_check failed")
        return code

    print("\n✅ dev_check passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
