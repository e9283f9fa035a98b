# scripts/smoke_test.py
import time
import requests
from concurrent.futures import ThreadPoolExecutor

# Configuration
BASE_URL = "http://localhost:8000/api/v1"
NUM_REQUESTS = 200
CONCURRENCY = 20

ENDPOINTS = [
    "/all-transactions?month=3&page=1&perPage=10",
    "/all-transactions?month=3&searchText=cotton",
    "/statistics?month=3",
    "/bar-chart-data?month=3",
    "/pie-chart-data?month=3",
    "/combined-data?month=3",
]

def hit(path):
    start = time.time()
    response = requests.get(BASE_URL + path, timeout=30)
    return path, response.status_code, time.time() - start

def run_smoke_test():
    print(f"Sending {NUM_REQUESTS} requests with concurrency {CONCURRENCY}...")
    paths = [ENDPOINTS[i % len(ENDPOINTS)] for i in range(NUM_REQUESTS)]

    start_time = time.time()
    with ThreadPoolExecutor(max_workers=CONCURRENCY) as pool:
        results = list(pool.map(hit, paths))
    duration = time.time() - start_time

    for path in ENDPOINTS:
        timings = [elapsed for p, _, elapsed in results if p == path]
        failures = [status for p, status, _ in results if p == path and status != 200]
        print(f"{path}: avg {sum(timings) / len(timings) * 1000:.1f} ms, {len(failures)} failures")
    print(f"Done in {duration:.2f} seconds.")

if __name__ == "__main__":
    try:
        # Check if the server is running
        requests.get("http://localhost:8000/", timeout=5)
        run_smoke_test()
    except requests.exceptions.ConnectionError:
        print("Error: Could not connect to API.")
        print("Make sure the app is running: 'uvicorn dashboard_api.main:app --reload'")
