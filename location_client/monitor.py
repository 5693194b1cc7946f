import asyncio
import httpx
import time
import logging
import os

logger = logging.getLogger("Monitor")
API_URL = os.getenv("API_URL", "http://localhost:8000/api")
TIMEOUT_S = float(os.getenv("CLIENT_TIMEOUT_S", "60"))
PROBE_INTERVAL_S = float(os.getenv("PROBE_INTERVAL_S", "1"))


async def probe(client):
    """One poll of the latest location. Returns the record, or None."""
    start_ts = time.time()
    try:
        resp = await client.get("/location/last")
    except httpx.HTTPError as e:
        logger.error(f"FAILED: {type(e).__name__}")
        return None
    duration = time.time() - start_ts
    if resp.status_code == 200:
        last = resp.json()
        logger.info(f"OK ID={last['ID']} Lat={last['Latitude']:.6f} "
                    f"Lon={last['Longitude']:.6f} ({duration:.2f}s)")
        return last
    if resp.status_code == 404:
        logger.info(f"EMPTY ({duration:.2f}s)")
    else:
        logger.error(f"ERROR Status:{resp.status_code} ({duration:.2f}s)")
    return None


async def run_monitor(api_url=API_URL, max_probes=None, interval=PROBE_INTERVAL_S, transport=None):
    limits = httpx.Limits(max_connections=10, max_keepalive_connections=10)
    seen = []
    async with httpx.AsyncClient(base_url=api_url, limits=limits, timeout=TIMEOUT_S,
                                 transport=transport) as client:
        logger.info(f"Started (1 probe/{interval:g}s)")
        probes = 0
        while max_probes is None or probes < max_probes:
            last = await probe(client)
            if max_probes is not None:
                seen.append(last)
            probes += 1
            if max_probes is None or probes < max_probes:
                await asyncio.sleep(interval)
    return seen


def main():
    logging.basicConfig(level=logging.INFO, format="[Monitor] %(asctime)s - %(message)s")
    asyncio.run(run_monitor())


if __name__ == "__main__":
    main()
