"""hufftree CLI.

This is the stable CLI entrypoint (console-script: ``hufftree``).

UX policy:
  - compress/decompress work on files; partial output of a failed decompress
    is removed unless --keep-partial.
  - Diagnostics go to stderr with a ``[hufftree]`` prefix; -v raises the level.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from hufftree.core.huff_format import PSEUDO_EOF
from hufftree.errors import EXIT_USAGE, HuffTreeError
from hufftree.run_spec import RunSpecError, RunSpecV1, load_run_spec


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")


def _add_run_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--spec",
        default=None,
        help="Run spec (JSON). Use '@file.json' to load from file, or pass JSON inline.",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=None,
        help="Diagnostics on stderr (repeat for more, max 4). Overrides spec.debug.",
    )


def _resolve_run_spec(ns: argparse.Namespace, **overrides: bool | None) -> RunSpecV1:
    # precedence: CLI flags > spec > defaults
    base = load_run_spec(ns.spec) if ns.spec else RunSpecV1()
    return base.merged(debug=ns.verbose, **overrides)


def _cmd_compress(ns: argparse.Namespace) -> int:
    from hufftree.core.codec_hufftree import compress_file

    run = _resolve_run_spec(ns, verify=True if ns.verify else None)
    stats = compress_file(ns.input, ns.output, debug=run.debug)

    if run.verify:
        from hufftree.verify import verify_roundtrip

        verify_roundtrip(ns.input, ns.output)

    if run.debug:
        print(
            f"[hufftree] {run.name}: {stats.bytes_in} byte -> {stats.bits_out} bit, "
            f"{stats.leaves} foglie",
            file=sys.stderr,
        )
    return 0


def _cmd_decompress(ns: argparse.Namespace) -> int:
    from hufftree.core.codec_hufftree import decompress_file

    run = _resolve_run_spec(ns, keep_partial=True if ns.keep_partial else None)
    res = decompress_file(ns.input, ns.output, keep_partial=run.keep_partial, debug=run.debug)
    res.raise_for_error()
    return 0


def _cmd_verify(ns: argparse.Namespace) -> int:
    from hufftree.verify import verify_compressed_file

    rep = verify_compressed_file(ns.input, full=bool(ns.full))
    if ns.json:
        print(json.dumps(asdict(rep), ensure_ascii=False, sort_keys=True))
    else:
        print("OK")
    return 0


def _cmd_inspect(ns: argparse.Namespace) -> int:
    from hufftree.verify import read_code_table

    codes = read_code_table(ns.input)
    if ns.json:
        obj = {"leaves": len(codes), "codes": {str(k): codes[k] for k in sorted(codes)}}
        print(json.dumps(obj, ensure_ascii=False))
        return 0

    print(f"leaves: {len(codes)}")
    for sym in sorted(codes):
        label = "EOF" if sym == PSEUDO_EOF else f"{sym:3d}"
        print(f"{label}  {codes[sym] or '(empty)'}")
    return 0


def _cmd_spec_validate(ns: argparse.Namespace) -> int:
    # load is the validation
    load_run_spec(str(ns.spec))
    print("OK")
    return 0


def _cmd_bench(ns: argparse.Namespace) -> int:
    from hufftree.bench import bench_file, bench_summary

    rows = []
    for p in ns.files:
        row = bench_file(p, iters=ns.iters)
        rows.append(row)
        print(json.dumps(row, ensure_ascii=False))
    summary = bench_summary(rows)
    print(json.dumps(summary, ensure_ascii=False))
    return 0 if summary["all_roundtrip_ok"] else 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="hufftree", description="Huffman compressor with a self-describing tree header"
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_c = sub.add_parser("compress", help="Lossless compress")
    p_c.add_argument("input", type=Path)
    p_c.add_argument("output", type=Path)
    p_c.add_argument(
        "--verify", action="store_true", help="Decode the output and compare with the input"
    )
    _add_run_args(p_c)
    _add_common_args(p_c)

    p_d = sub.add_parser("decompress", help="Lossless decompress")
    p_d.add_argument("input", type=Path)
    p_d.add_argument("output", type=Path)
    p_d.add_argument(
        "--keep-partial",
        action="store_true",
        help="Keep the partially written output when decoding fails",
    )
    _add_run_args(p_d)
    _add_common_args(p_d)

    p_v = sub.add_parser("verify", help="Verify a compressed file")
    p_v.add_argument("input", type=Path)
    p_v.add_argument("--full", action="store_true", help="Decode the whole body (sha256)")
    p_v.add_argument("--json", action="store_true", help="Print the report as JSON")
    _add_common_args(p_v)

    p_i = sub.add_parser("inspect", help="Show the code table embedded in a compressed file")
    p_i.add_argument("input", type=Path)
    p_i.add_argument("--json", action="store_true", help="Print as JSON")
    _add_common_args(p_i)

    p_s = sub.add_parser("spec-validate", help="Validate a run spec (v1)")
    p_s.add_argument("spec", help="Run spec JSON (@file.json or inline JSON)")
    _add_common_args(p_s)

    p_b = sub.add_parser("bench", help="Benchmark files (JSON lines on stdout)")
    p_b.add_argument("files", nargs="+", type=Path)
    p_b.add_argument("--iters", type=int, default=1)
    _add_common_args(p_b)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    p = build_parser()
    ns = p.parse_args(argv)

    handlers = {
        "compress": _cmd_compress,
        "decompress": _cmd_decompress,
        "verify": _cmd_verify,
        "inspect": _cmd_inspect,
        "spec-validate": _cmd_spec_validate,
        "bench": _cmd_bench,
    }

    try:
        handler = handlers.get(ns.cmd)
        if handler is None:
            raise AssertionError("unreachable")
        return handler(ns)

    except SystemExit:
        raise
    except RunSpecError as e:
        # Treat as usage/config error.
        if getattr(ns, "debug", False):
            raise
        print(f"[hufftree] {e}", file=sys.stderr)
        return EXIT_USAGE
    except HuffTreeError as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[hufftree] {e}", file=sys.stderr)
        return int(getattr(e, "exit_code", 10) or 10)
    except Exception as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[hufftree] error: {e}", file=sys.stderr)
        return 10


if __name__ == "__main__":
    raise SystemExit(main())
