"""
Demo script for the codegen cache service.

Talks to a running instance over HTTP:

    SERVICE_API_KEY=secret python -m codegen_cache.api.app
    SERVICE_API_KEY=secret python scripts/demo.py
"""

import os
import time

import httpx
from dotenv import load_dotenv

load_dotenv()

BASE_URL = os.getenv("DEMO_BASE_URL", "http://localhost:8080")
DEVICE = "demo-board"


def print_section(title: str) -> None:
    """Print a section header."""
    print(f"\n{'=' * 70}")
    print(f"  {title}")
    print(f"{'=' * 70}")


def timed_generate(client: httpx.Client, **body) -> dict:
    start = time.time()
    response = client.post("/generate", json=body)
    duration = (time.time() - start) * 1000
    response.raise_for_status()
    data = response.json()
    print(f"  ({duration:.0f}ms) prompt: {data['prompt']!r}")
    print(f"  output: {data['output'][:200]!r}")
    return data


def demo_memoization(client: httpx.Client) -> None:
    """First call generates, second call is served from the store."""
    print_section("Memoization")

    request = {
        "device_name": DEVICE,
        "keyword": "led",
        "language": "python",
        "prompt": "Write MicroPython code that blinks an LED on pin 2 every second.",
    }

    print("\n📝 First request (refresh=true, generates):")
    first = timed_generate(client, **request, refresh=True)

    print("\n⚡ Second request (served from store, prompt ignored):")
    second = timed_generate(client, **{**request, "prompt": "anything"})

    if first["output"] == second["output"]:
        print("  ✓ Same output returned without regeneration")
    else:
        print("  ✗ Output changed unexpectedly")


def demo_refresh(client: httpx.Client) -> None:
    """refresh=true replaces the stored entry."""
    print_section("Refresh")

    timed_generate(
        client,
        device_name=DEVICE,
        keyword="led",
        language="python",
        prompt="Write MicroPython code that fades an LED on pin 2 with PWM.",
        refresh=True,
    )

    stored = client.get("/code", params={"device": DEVICE}).json()
    print(f"\n  Stored prompt is now: {stored['prompt']!r}")


def demo_not_found(client: httpx.Client) -> None:
    """Unknown devices return 404."""
    print_section("Unknown Device")

    response = client.get("/code", params={"device": "no-such-device"})
    print(f"\n  GET /code?device=no-such-device -> {response.status_code} {response.json()}")


def main() -> None:
    """Run all demos."""
    print("\n🚀 Codegen Cache Demo")
    print(f"Service: {BASE_URL}")

    headers = {"X-API-Key": os.getenv("SERVICE_API_KEY", "")}
    try:
        with httpx.Client(base_url=BASE_URL, headers=headers, timeout=180.0) as client:
            demo_memoization(client)
            demo_refresh(client)
            demo_not_found(client)
            print(f"\n📊 Stats: {client.get('/stats').json()}")

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)

    except httpx.HTTPError as e:
        print(f"\n❌ Error: {e}")
        print("\nMake sure the service is running and SERVICE_API_KEY matches:")
        print("  SERVICE_API_KEY=... python -m codegen_cache.api.app")


if __name__ == "__main__":
    main()
