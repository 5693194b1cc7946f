import os
import threading
import time
import logging
import requests

from location_client.send_location import API_URL, get_location


BURST_SIZE = int(os.getenv("BURST_SIZE", "10"))
BURST_COUNT = int(os.getenv("BURST_COUNT", "4"))
BURST_PAUSE_S = float(os.getenv("BURST_PAUSE_S", "5"))


def send_request(results, api_url=API_URL):
    """Post one simulated location; record whether the server stored it."""
    try:
        response = requests.post(f"{api_url}/location", json=get_location(), timeout=65)
        response.raise_for_status()
        results.append(True)
    except requests.exceptions.Timeout:
        logging.error("Client: ERROR! Operation timed out.")
        results.append(False)
    except requests.exceptions.RequestException as e:
        logging.error(f"Client: ERROR! An unexpected error occurred: {e}")
        results.append(False)


def run_burst(num_requests, api_url=API_URL):
    """Send num_requests posts in parallel; returns how many were saved."""
    results = []
    threads = []
    for _ in range(num_requests):
        thread = threading.Thread(target=send_request, args=(results, api_url))
        threads.append(thread)
        thread.start()

    for thread in threads:
        thread.join()
    return sum(results)


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    logging.info(f"Sending {BURST_COUNT} bursts of {BURST_SIZE} to {API_URL}")
    for i in range(BURST_COUNT):
        saved = run_burst(BURST_SIZE)
        logging.info(f"Burst {i + 1}/{BURST_COUNT}: {saved}/{BURST_SIZE} saved")
        if i + 1 < BURST_COUNT:
            time.sleep(BURST_PAUSE_S)


if __name__ == "__main__":
    main()
