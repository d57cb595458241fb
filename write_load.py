"""
write_load.py — concurrent create load against a running server

Fires POST /shorten requests in parallel, records every returned code to a
JSONL file and reports how many codes came back more than once (should be 0).

Usage:
  python write_load.py --base http://127.0.0.1:8080 --count 2000 --concurrency 100 --out codes_created.jsonl
"""
import argparse
import asyncio
import json
import time
import uuid
from collections import Counter
from datetime import datetime, timezone

import httpx


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


async def _create_one(client: httpx.AsyncClient, base: str, idx: int):
    url = f"https://example.com/load/{idx}/{uuid.uuid4().hex[:8]}"
    try:
        r = await client.post(f"{base}/shorten", json={"url": url}, timeout=10)
        r.raise_for_status()
    except httpx.HTTPError:
        return None
    return r.json().get("short_code"), url


async def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base", default="http://127.0.0.1:8080")
    parser.add_argument("--count", type=int, default=2000)
    parser.add_argument("--concurrency", type=int, default=100)
    parser.add_argument("--out", default="codes_created.jsonl")
    args = parser.parse_args()

    start_iso = _now_iso()
    t0 = time.perf_counter()
    created = []

    limit = httpx.Limits(max_connections=args.concurrency, max_keepalive_connections=args.concurrency)
    async with httpx.AsyncClient(limits=limit) as client:
        sem = asyncio.Semaphore(args.concurrency)

        async def _task(i):
            async with sem:
                result = await _create_one(client, args.base, i)
                if result and result[0]:
                    created.append(result)

        await asyncio.gather(*(_task(i) for i in range(args.count)))

    dt = time.perf_counter() - t0

    with open(args.out, "w", encoding="utf-8") as out_f:
        for code, url in created:
            out_f.write(json.dumps({"code": code, "url": url}) + "\n")

    duplicates = sum(n - 1 for n in Counter(code for code, _ in created).values() if n > 1)
    print(f"START: {start_iso}")
    print(f"END:   {_now_iso()}")
    print(f"TOTAL: {dt:.3f} s")
    print(f"OPS:   writes={args.count}, ok={len(created)}, fail={args.count - len(created)}")
    print(f"DUPES: {duplicates}")
    if dt > 0:
        print(f"TPS:   {len(created)/dt:.1f} req/s")


if __name__ == "__main__":
    asyncio.run(main())
