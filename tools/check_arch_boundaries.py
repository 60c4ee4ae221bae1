#!/usr/bin/env python3
"""Run the architecture boundary checks without pytest (CI pre-step).

Exit codes: 0 OK, 2 violation, 3 setup error.
"""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path

CHECKS = ("test_core_never_imports_orchestrator", "test_core_is_config_free")


def main() -> int:
    repo_root = Path(__file__).resolve().parents[1]
    test_path = repo_root / "tests" / "test_arch_boundaries.py"
    if not test_path.is_file():
        print(f"ERROR: {test_path} not found.", file=sys.stderr)
        return 3

    spec = importlib.util.spec_from_file_location("hufftree_arch_boundaries", test_path)
    if spec is None or spec.loader is None:
        print(f"ERROR: cannot load {test_path}", file=sys.stderr)
        return 3
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)

    failed = 0
    for name in CHECKS:
        fn = getattr(mod, name, None)
        if not callable(fn):
            print(f"ERROR: {name} not found.", file=sys.stderr)
            return 3
        try:
            fn()
        except AssertionError as e:
            print(str(e), file=sys.stderr)
            failed += 1

    if failed:
        return 2
    print(f"OK: architecture boundaries respected ({len(CHECKS)} checks).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
