# location_client/send_location.py

import argparse
import os
import time
import random
import requests

API_URL = os.getenv("API_URL", "http://localhost:8000/api")
TIMEOUT_S = float(os.getenv("CLIENT_TIMEOUT_S", "5"))


def get_location():
    """Simulated device fix somewhere around Bangkok."""
    lat = round(random.uniform(13.5, 14.0), 6)
    lon = round(random.uniform(100.3, 100.8), 6)
    return {"Latitude": lat, "Longitude": lon}


def send_location(lat, lon, api_url=API_URL):
    response = requests.post(
        f"{api_url}/location",
        json={"Latitude": lat, "Longitude": lon},
        timeout=TIMEOUT_S,
    )
    print(f"[SEND] status={response.status_code}, body={response.text.strip()}")
    return response.status_code == 201


def fetch_last_location(api_url=API_URL):
    """Latest stored record as a dict, or None while the server has nothing."""
    response = requests.get(f"{api_url}/location/last", timeout=TIMEOUT_S)
    if response.status_code == 404:
        return None
    response.raise_for_status()
    return response.json()


def show_last_location(api_url=API_URL):
    try:
        last = fetch_last_location(api_url)
    except requests.exceptions.RequestException as e:
        print(f"[ERROR] Failed to fetch last location: {e}")
        return None
    if last is None:
        print("[LAST] No location saved yet.")
    else:
        print(f"[LAST] ID={last['ID']}, Lat={last['Latitude']:.6f}, "
              f"Lon={last['Longitude']:.6f}, at {last['Timestamp']}")
    return last


def report(lat=None, lon=None, api_url=API_URL):
    if lat is None or lon is None:
        fix = get_location()
        lat, lon = fix["Latitude"], fix["Longitude"]
    print(f"[FIX] Lat: {lat:.6f}, Lon: {lon:.6f}")
    try:
        saved = send_location(lat, lon, api_url)
    except requests.exceptions.RequestException as e:
        print(f"[ERROR] Failed to send data: {e}")
        return False
    if saved:
        show_last_location(api_url)
    return saved


def main(argv=None):
    ap = argparse.ArgumentParser(description="Post a location and show the latest saved one")
    ap.add_argument("--api-url", default=API_URL, help="e.g. http://localhost:8000/api")
    ap.add_argument("--lat", type=float, help="latitude; simulated when omitted")
    ap.add_argument("--lon", type=float, help="longitude; simulated when omitted")
    ap.add_argument("--interval", type=float, default=5, help="seconds between sends")
    ap.add_argument("--count", type=int, default=1, help="number of sends, 0 = forever")
    args = ap.parse_args(argv)

    show_last_location(args.api_url)
    sent = 0
    while True:
        report(args.lat, args.lon, args.api_url)
        sent += 1
        if args.count and sent >= args.count:
            break
        time.sleep(args.interval)


if __name__ == "__main__":
    main()
