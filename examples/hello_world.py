"""
origin_storage — Hello World

One origin, one aggregate. Values expire, oversized aggregates are
rejected, and a full backend evicts expired then oldest aggregates.
"""

import asyncio
import logging
import tempfile
from pathlib import Path

from origin_storage import EntryTooLargeError, StorageConfigSchema, create_storage


def report(error) -> None:
    print(f"  [ERROR] code={error.code}  message={error.message}")


async def main():
    logging.basicConfig(level=logging.INFO)

    with tempfile.TemporaryDirectory() as tmp:
        # ──────────────────────────────────────
        #  1. Build a storage for a cached page
        # ──────────────────────────────────────
        storage = create_storage(
            StorageConfigSchema(
                url="https://mipcache.bdstatic.com/c/s/www.example.com/index.html",
                path=str(Path(tmp) / "storage.db"),
            )
        )
        print(f"origin={storage.origin}  aggregated={storage.aggregated}")

        # ──────────────────────────────────────
        #  2. Plain values and values with a TTL
        # ──────────────────────────────────────
        await storage.set("theme", "dark")
        await storage.set("session", "abc123", 3600)
        print("theme   ->", await storage.get("theme"))
        print("session ->", await storage.get("session"))

        # ──────────────────────────────────────
        #  3. The aggregate is capped at 4 KiB
        # ──────────────────────────────────────
        try:
            await storage.set("blob", "x" * 5000, on_error=report)
        except EntryTooLargeError:
            print("blob    -> rejected, nothing written")

        # ──────────────────────────────────────
        #  4. Housekeeping
        # ──────────────────────────────────────
        print("expired aggregates removed:", await storage.sweep_expired())
        await storage.rm("theme")
        await storage.clear()
        print("after clear ->", await storage.get("session"))

        await storage.close()


if __name__ == "__main__":
    asyncio.run(main())
