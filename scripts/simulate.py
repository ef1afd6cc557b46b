"""
Concurrency Simulation Script

Fires a burst of simultaneous order creations at a running server and
checks that every order of the burst received a distinct short id.
Run from project root: python scripts/simulate.py --orders 50
"""

import asyncio
import sys
import random
import time
import argparse
from collections import Counter
from datetime import datetime
from typing import Any

import httpx

# Configuration
API_BASE_URL = "http://localhost:3001"
TOTAL_ORDERS = 50

# Sample data for random orders
BREADS = ["Pão francês", "Pão de forma", "Pão australiano", "Sem pão"]
DRINKS = ["Coca-Cola", "Suco de laranja", "Água", "Guaraná"]
MEATS = ["Picanha", "Frango", "Linguiça", "Costela"]
SALADS = ["Alface e tomate", "Vinagrete", "Maionese", "Sem salada"]
SIDE_DISHES = ["Arroz", "Feijão tropeiro", "Farofa", "Mandioca"]
STREETS = ["Rua das Flores", "Av. Brasil", "Rua XV de Novembro", "Rua Chile"]
NEIGHBORHOODS = ["Centro", "Batel", "Água Verde", "Rebouças"]


def generate_payload() -> dict[str, Any]:
    """Random but valid creation body."""
    return {
        "delivery": {
            "bread": random.choice(BREADS),
            "drink": random.choice(DRINKS),
            "local": random.random() < 0.3,
            "meats": random.choice(MEATS),
            "salad": random.choice(SALADS),
            "sideDish": random.choice(SIDE_DISHES),
        },
        "address": {
            "address": f"{random.choice(STREETS)}, {random.randint(1, 999)}",
            "city": "Curitiba",
            "complement": random.choice([None, "Apto 12", "Casa 2", "Fundos"]),
            "neighborhood": random.choice(NEIGHBORHOODS),
            "postalCode": f"80{random.randint(100, 999)}-{random.randint(100, 999)}",
            "state": "PR",
        },
        "payment": {
            "attachment": None,
            "fileName": f"comprovante-{random.randint(1000, 9999)}.pdf",
        },
    }


async def send_order(client: httpx.AsyncClient, order_num: int) -> dict[str, Any]:
    """POST one order and time it."""
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/v1/delivery",
            json=generate_payload(),
            timeout=30.0
        )
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 201:
            return {
                "order_num": order_num,
                "success": True,
                "short_id": response.json().get("id"),
                "time": elapsed,
            }
        return {
            "order_num": order_num,
            "success": False,
            "error": f"{response.status_code} {response.text[:100]}",
            "time": elapsed,
        }
    except httpx.HTTPError as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": elapsed,
        }


async def run_simulation(num_orders: int = TOTAL_ORDERS) -> dict[str, Any]:
    """
    Send `num_orders` creations at once and analyze the short ids.

    Args:
        num_orders: Number of concurrent orders
    """
    print("=" * 70)
    print("CONCURRENCY SIMULATION")
    print("=" * 70)
    print(f"Total Orders: {num_orders}")
    print(f"Target: {API_BASE_URL}")
    print(f"Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()
    async with httpx.AsyncClient() as client:
        tasks = [send_order(client, i + 1) for i in range(num_orders)]
        results = await asyncio.gather(*tasks)
    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]
    duplicates = {
        short_id: seen
        for short_id, seen in Counter(r["short_id"] for r in successful).items()
        if seen > 1
    }

    print(f"\nSuccessful Orders: {len(successful)}/{num_orders}")
    print(f"Failed Orders: {len(failed)}/{num_orders}")
    print(f"Total Time: {total_time}s")

    if successful:
        times = [r["time"] for r in successful]
        ids = sorted(r["short_id"] for r in successful)
        print("\nPerformance Metrics:")
        print(f"   Average Response: {round(sum(times) / len(times), 3)}s")
        print(f"   Fastest: {min(times)}s")
        print(f"   Slowest: {max(times)}s")
        print(f"   Short ids: {ids[0]} .. {ids[-1]}")

    if duplicates:
        print(f"\nDuplicate short ids: {duplicates}")
    else:
        print("\nNo duplicate short ids")

    if failed:
        print("\nFailed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f['error']}")

    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "duplicates": duplicates,
        "total_time": total_time,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Concurrency Simulation Script")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--url", default=API_BASE_URL, help="Server base URL")
    args = parser.parse_args()

    API_BASE_URL = args.url.rstrip("/")
    summary = asyncio.run(run_simulation(args.orders))
    sys.exit(1 if summary["duplicates"] or summary["failed"] else 0)
