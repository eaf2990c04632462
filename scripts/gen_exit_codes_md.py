#!/usr/bin/env python3
"""Write docs/exit_codes.md: the huffkit process exit codes (usage, corrupt or
unsupported containers, sha256 mismatch, I/O) rendered from src/huffkit/errors.py.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> int:
    repo = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo / "src"))

    from huffkit import errors  # noqa: E402

    out = repo / "docs" / "exit_codes.md"
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(errors.render_exit_codes_markdown(), encoding="utf-8")
    print(f"[huffkit] wrote {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
