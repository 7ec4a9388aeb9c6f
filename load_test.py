"""
load_test.py - async load generator for a running Shortlink service

Usage:
  python load_test.py write --base http://127.0.0.1:1337 --count 2000 --concurrency 100 --out links_created.jsonl
  python load_test.py read  --base http://127.0.0.1:1337 --in links_created.jsonl --count 15000 --concurrency 200

`write` POSTs random URLs to /api/shorten and records {"code", "url"} lines;
`read` replays GET /<code> against those codes without following redirects.
"""
import argparse
import asyncio
import json
import random
import string
import time
from datetime import datetime, timezone

import httpx


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


def _random_url(idx: int) -> str:
    host = f"{random.choice(['example', 'sample', 'demo', 'test'])}.{random.choice(['com', 'net', 'org', 'io'])}"
    path = "".join(random.choice(string.ascii_letters + string.digits) for _ in range(8))
    return f"https://{host}/{path}?q={idx}"


def _load_codes(path):
    codes = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                code = json.loads(line).get("code")
            except json.JSONDecodeError:
                continue
            if code:
                codes.append(code)
    return codes


async def _create_one(client: httpx.AsyncClient, base: str, idx: int):
    url = _random_url(idx)
    r = await client.post(f"{base}/api/shorten", json={"url": url}, timeout=10)
    data = r.json()
    if r.status_code != 200 or not data.get("success"):
        return None
    return {"code": data["shortCode"], "url": url}


async def _hit_one(client: httpx.AsyncClient, base: str, code: str) -> bool:
    r = await client.get(f"{base}/{code}", timeout=10, follow_redirects=False)
    return r.status_code == 302


async def _run(jobs, concurrency: int):
    """Run coroutine factories with bounded concurrency; count truthy, non-failing results."""
    sem = asyncio.Semaphore(concurrency)
    results = []

    async def _task(job):
        async with sem:
            try:
                results.append(await job())
            except httpx.HTTPError:
                results.append(None)

    await asyncio.gather(*(_task(job) for job in jobs))
    return results


def _report(op: str, count: int, ok: int, t0: float, start_iso: str):
    dt = time.perf_counter() - t0
    print(f"START: {start_iso}")
    print(f"END:   {_now_iso()}")
    print(f"TOTAL: {dt:.3f} s")
    print(f"OPS:   {op}={count}, ok={ok}, fail={count - ok}")
    if dt > 0:
        print(f"RPS:   {ok/dt:.1f} req/s")


async def write(args):
    start_iso, t0 = _now_iso(), time.perf_counter()
    limits = httpx.Limits(max_connections=args.concurrency, max_keepalive_connections=args.concurrency)
    async with httpx.AsyncClient(limits=limits) as client:
        results = await _run(
            [lambda i=i: _create_one(client, args.base, i) for i in range(args.count)],
            args.concurrency,
        )
    created = [r for r in results if r]
    with open(args.out, "w", encoding="utf-8") as out_f:
        for row in created:
            out_f.write(json.dumps(row) + "\n")
    _report("writes", args.count, len(created), t0, start_iso)


async def read(args):
    codes = _load_codes(args.codes_file)
    if not codes:
        print(f"No codes found in {args.codes_file}. Run `load_test.py write` first.")
        return
    start_iso, t0 = _now_iso(), time.perf_counter()
    limits = httpx.Limits(max_connections=args.concurrency, max_keepalive_connections=args.concurrency)
    async with httpx.AsyncClient(limits=limits) as client:
        results = await _run(
            [lambda: _hit_one(client, args.base, random.choice(codes)) for _ in range(args.count)],
            args.concurrency,
        )
    _report("reads", args.count, sum(1 for r in results if r), t0, start_iso)


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base", default="http://127.0.0.1:1337")
    parser.add_argument("--concurrency", type=int, default=100)
    sub = parser.add_subparsers(dest="command", required=True)

    w = sub.add_parser("write", help="create short links")
    w.add_argument("--count", type=int, default=2000)
    w.add_argument("--out", default="links_created.jsonl")

    r = sub.add_parser("read", help="follow short links")
    r.add_argument("--count", type=int, default=15000)
    r.add_argument("--in", dest="codes_file", default="links_created.jsonl")

    args = parser.parse_args()
    asyncio.run(write(args) if args.command == "write" else read(args))


if __name__ == "__main__":
    main()
