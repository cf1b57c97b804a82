from __future__ import annotations

import argparse
import glob
import sys
from pathlib import Path

# Allow running from repo root without installing as a package.
sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

import httpx

from polarhooks.contracts.envelope import parse_envelope
from polarhooks.contracts.event_types import SIGNATURE_HEADERS
from polarhooks.core.signature import compute_signature


def _iter_event_files(root: Path) -> list[Path]:
    return [Path(p) for p in sorted(glob.glob(str(root / "*.json")))]


def main() -> None:
    ap = argparse.ArgumentParser(description="Sign and POST sample webhook envelopes.")
    ap.add_argument("--url", default="http://localhost:8000/api/webhook/polar")
    ap.add_argument("--events-dir", default=str(Path("contracts") / "sample_events"))
    ap.add_argument("--secret", default="", help="Signing secret; empty sends no signature header.")
    ap.add_argument("--dry-run", action="store_true")
    ap.add_argument(
        "--fail-on-invalid",
        action="store_true",
        help="By default invalid sample envelopes are skipped. Use this flag to fail fast instead.",
    )
    args = ap.parse_args()

    root = Path(args.events_dir)
    files = _iter_event_files(root)
    if not files:
        raise SystemExit(f"no sample events found under {root}")

    with httpx.Client(timeout=10.0) as client:
        for fp in files:
            body = fp.read_bytes()
            try:
                env = parse_envelope(body)
            except ValueError as e:
                if args.fail_on_invalid:
                    raise
                print(f"[skip-invalid] {fp.name}: {e}")
                continue

            headers = {"Content-Type": "application/json"}
            if args.secret:
                headers[SIGNATURE_HEADERS[0]] = compute_signature(body, args.secret)

            if args.dry_run:
                print(f"[dry-run] POST {args.url} <- {fp.name} ({env.type})")
                continue
            resp = client.post(args.url, content=body, headers=headers)
            print(f"POST {env.type} <- {fp.name}: {resp.status_code}")


if __name__ == "__main__":
    main()
