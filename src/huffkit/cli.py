"""huffkit CLI.

Stable entrypoint (console-script: ``huffkit``).

Errors are printed to stderr with the ``[huffkit]`` prefix and mapped to
the exit codes in ``huffkit.errors``; ``--debug`` re-raises instead.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from huffkit.codec_spec import CodecSpecError, CodecSpecV1, load_codec_spec
from huffkit.errors import EXIT_GENERIC, EXIT_USAGE, HuffkitError


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")


def _resolve_spec(
    spec_arg: str | None, *, chunk_size: int | None, no_checksum: bool, verify: bool
) -> CodecSpecV1:
    # precedence: --spec > flags > defaults
    if spec_arg is not None:
        return load_codec_spec(spec_arg)
    spec = CodecSpecV1()
    if chunk_size is not None:
        if chunk_size <= 0:
            raise CodecSpecError("--chunk-size deve essere > 0")
        spec = replace(spec, chunk_size=int(chunk_size))
    if no_checksum:
        spec = replace(spec, checksum=False)
    if verify:
        spec = replace(spec, verify=True)
    return spec


def _cmd_compress(ns: argparse.Namespace) -> int:
    from huffkit.files import compress_file
    from huffkit.stats import format_compress_summary

    spec = _resolve_spec(
        ns.spec, chunk_size=ns.chunk_size, no_checksum=bool(ns.no_checksum), verify=bool(ns.verify)
    )
    res = compress_file(ns.input, ns.output, spec)
    if not ns.quiet:
        print(format_compress_summary(res.n, res.output_size, spec.name), end="")
    return 0


def _cmd_decompress(ns: argparse.Namespace) -> int:
    from huffkit.files import decompress_file

    decompress_file(ns.input, ns.output)
    return 0


def _cmd_verify(ns: argparse.Namespace) -> int:
    from huffkit.verify import verify_container_file

    verify_container_file(ns.input, full=bool(ns.full))
    print("OK")
    return 0


def _cmd_stats(ns: argparse.Namespace) -> int:
    from huffkit.stats import render_stats, stats_for_file

    st = stats_for_file(ns.input)
    print(render_stats(st, label=str(ns.input), show_codes=bool(ns.codes)), end="")
    return 0


def _cmd_spec_validate(ns: argparse.Namespace) -> int:
    # load is the validation
    load_codec_spec(str(ns.spec))
    print("OK")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="huffkit", description="Huffman file compressor")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_c = sub.add_parser("compress", help="Lossless compress into an HFK container")
    p_c.add_argument("input", type=Path)
    p_c.add_argument("output", type=Path)
    p_c.add_argument(
        "--spec",
        default=None,
        help=(
            "Codec spec (JSON). Use '@file.json' to load from file, or pass JSON inline. "
            "When set, --chunk-size/--no-checksum/--verify are ignored."
        ),
    )
    p_c.add_argument("--chunk-size", type=int, default=None, help="Read/write buffer size in bytes")
    p_c.add_argument("--no-checksum", action="store_true", help="Do not store the sha256 of the input")
    p_c.add_argument("--verify", action="store_true", help="Decode the output before publishing it")
    p_c.add_argument("--quiet", action="store_true", help="Do not print the size summary")
    p_c.set_defaults(func=_cmd_compress)
    _add_common_args(p_c)

    p_d = sub.add_parser("decompress", help="Lossless decompress an HFK container")
    p_d.add_argument("input", type=Path)
    p_d.add_argument("output", type=Path)
    p_d.set_defaults(func=_cmd_decompress)
    _add_common_args(p_d)

    p_v = sub.add_parser("verify", help="Verify an HFK container")
    p_v.add_argument("input", type=Path)
    p_v.add_argument("--full", action="store_true", help="Decode everything and check sha256")
    p_v.set_defaults(func=_cmd_verify)
    _add_common_args(p_v)

    p_s = sub.add_parser("stats", help="Show Huffman statistics for a raw file")
    p_s.add_argument("input", type=Path)
    p_s.add_argument("--codes", action="store_true", help="Also print the code table")
    p_s.set_defaults(func=_cmd_stats)
    _add_common_args(p_s)

    p_sv = sub.add_parser("spec-validate", help="Validate a codec spec (v1)")
    p_sv.add_argument("spec", help="Codec spec JSON (@file.json or inline JSON)")
    p_sv.set_defaults(func=_cmd_spec_validate)
    _add_common_args(p_sv)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    p = build_parser()
    ns = p.parse_args(argv)

    try:
        return int(ns.func(ns))
    except SystemExit:
        raise
    except CodecSpecError as e:
        # Treat as usage/config error.
        if getattr(ns, "debug", False):
            raise
        print(f"[huffkit] {e}", file=sys.stderr)
        return EXIT_USAGE
    except HuffkitError as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[huffkit] {e}", file=sys.stderr)
        return int(getattr(e, "exit_code", EXIT_GENERIC) or EXIT_GENERIC)
    except Exception as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[huffkit] error: {e}", file=sys.stderr)
        return EXIT_GENERIC


if __name__ == "__main__":
    raise SystemExit(main())
