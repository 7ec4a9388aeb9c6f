"""
seed_links.py - bulk-insert synthetic links straight into the configured store

Usage:
  python seed_links.py --count 2000 --prefix mk --out mock_codes.jsonl
  SHORTLINK_STORE_BACKEND=postgres SHORTLINK_DB_DSN=postgresql://... python seed_links.py

Codes are "<prefix><counter as base62, left-padded to 6>", so reruns with the
same --start collide and are skipped instead of duplicated.
"""
import argparse
import json
import time
from datetime import datetime, timezone

from shortlink.config import configure_logging, load_settings
from shortlink.errors import ConstraintError
from shortlink.service.codes import CODE_ALPHABET
from shortlink.storage.storage_factory import get_store


def base62(n: int) -> str:
    if n == 0:
        return CODE_ALPHABET[0]
    out = []
    while n > 0:
        n, r = divmod(n, len(CODE_ALPHABET))
        out.append(CODE_ALPHABET[r])
    return "".join(reversed(out))


def now_iso():
    return datetime.now(timezone.utc).isoformat()


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--count", type=int, default=2000, help="rows to insert")
    ap.add_argument("--prefix", default="mk", help="code prefix")
    ap.add_argument("--start", type=int, default=1_000_000, help="counter start")
    ap.add_argument("--out", default="mock_codes.jsonl")
    args = ap.parse_args()

    settings = load_settings()
    configure_logging(settings.LOG_LEVEL)
    store = get_store(settings)

    start_iso = now_iso()
    t0 = time.perf_counter()
    ok = skipped = 0

    try:
        with open(args.out, "w", encoding="utf-8") as outf:
            for i in range(args.count):
                n = args.start + i
                code = f"{args.prefix}{base62(n).rjust(6, CODE_ALPHABET[0])}"
                url = f"https://example.com/{n}"
                try:
                    store.insert(url, code, int(time.time() * 1000))
                except ConstraintError:
                    skipped += 1
                    continue
                ok += 1
                outf.write(json.dumps({"code": code, "url": url}) + "\n")
    finally:
        store.close()

    dt = time.perf_counter() - t0
    print(f"START:    {start_iso}")
    print(f"END:      {now_iso()}")
    print(f"TOTAL:    {dt:.3f} s")
    print(f"INSERTED: {ok}/{args.count} rows ({skipped} already present)")
    if dt > 0:
        print(f"RPS:      {ok/dt:.1f} rows/s")


if __name__ == "__main__":
    main()
