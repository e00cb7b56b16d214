#!/usr/bin/env python3
"""
Complete dispatch flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_dispatch.py --booking-id <UUID>
    python scripts/flow_dispatch.py --booking-id <UUID> --rider-name "Kwame Rider" --rider-phone +233200000000

Flow:
    1. Load booking
    2. Confirm booking and assign rider
    3. Mark booking in progress
    4. Mark booking delivered
    5. Send tracking notification
    6. Print status history
"""

import argparse
import json
import sys

import httpx

BASE_URL = "http://localhost:8000"
ACTOR = "dispatch-script"


def api_request(method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make an API request as the script actor."""
    headers = {"X-Actor": ACTOR}
    url = f"{BASE_URL}/api/v1{endpoint}"

    if method == "GET":
        response = httpx.get(url, headers=headers, timeout=10.0, follow_redirects=True)
    elif method == "POST":
        response = httpx.post(url, headers=headers, json=data or {}, timeout=10.0, follow_redirects=True)
    else:
        raise ValueError(f"Unknown method: {method}")

    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def expect(result: dict, status: int, action: str) -> dict:
    if result["status"] != status:
        print(f"ERROR: {action} failed: {result['status']}")
        print(json.dumps(result["data"], indent=2))
        sys.exit(1)
    return result["data"]


def transition(booking_id: str, status: str, **fields) -> dict:
    result = api_request("POST", f"/bookings/{booking_id}/status", {"status": status, **fields})
    booking = expect(result, 200, f"Transition to {status}")
    print(f"Status: {booking['status_label']} (version {booking['version']})")
    return booking


def main():
    parser = argparse.ArgumentParser(description="Walk a booking through dispatch")
    parser.add_argument("--booking-id", required=True, help="Booking UUID")
    parser.add_argument("--rider-name", default="Kwame Rider", help="Rider name")
    parser.add_argument("--rider-phone", default="+233200000000", help="Rider phone")
    args = parser.parse_args()

    booking_id = args.booking_id

    print_step(1, "Load booking")
    booking = expect(api_request("GET", f"/bookings/{booking_id}"), 200, "Load booking")
    print(f"Tracking ID: {booking['tracking_id']}")
    print(f"Status: {booking['status_label']}")

    print_step(2, "Confirm and assign rider")
    transition(
        booking_id,
        "confirmed",
        rider_name=args.rider_name,
        rider_phone=args.rider_phone,
    )

    print_step(3, "Mark in progress")
    transition(booking_id, "in_progress")

    print_step(4, "Mark delivered")
    transition(booking_id, "delivered")

    print_step(5, "Send tracking notification")
    result = api_request("POST", f"/bookings/{booking_id}/notifications")
    if result["status"] == 202:
        print(f"Notification queued for {result['data']['recipient']}")
    else:
        print(f"WARNING: Notification not sent ({result['status']}): {result['data'].get('detail')}")

    print_step(6, "Status history")
    history = expect(api_request("GET", f"/bookings/{booking_id}/history"), 200, "Load history")
    for entry in history:
        print(f"{entry['created_at']}  {entry['status_label']:<12} {entry['created_by']:<16} {entry['note']}")

    print(f"\n{'='*60}")
    print("FLOW COMPLETE")
    print("="*60)


if __name__ == "__main__":
    main()
