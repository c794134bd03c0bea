"""
Submit a sample pickup order to a running instance.

Usage: python scripts/submit_sample_order.py [base_url]
"""

import asyncio
import json
import sys

import httpx

BASE_URL = "http://localhost:8000/api"

SAMPLE_ORDER = {
    "customerName": "Amahoro",
    "pickupAddress": "KG 11 Ave, Kigali",
    "pickupDateTime": "2024-05-01T10:00:00Z",
    "items": [
        {"name": "Shirt", "quantity": 3},
        {"name": "Suit", "quantity": "1"},
    ],
    "customerNotes": "Please ring the bell twice",
}


async def submit_order(base_url: str):
    """Post the sample order and print the response"""
    url = f"{base_url}/orders/pickup"

    phone = input("Customer WhatsApp number for confirmation (Enter to skip): ").strip()
    order = dict(SAMPLE_ORDER)
    if phone:
        order["customerPhone"] = phone

    print(f"🧪 Submitting order to {url}")
    print(json.dumps(order, indent=2, ensure_ascii=False))

    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(url, json=order, timeout=70.0)

        print(f"\n📥 Status: {response.status_code}")
        print(json.dumps(response.json(), indent=2, ensure_ascii=False))

        if response.status_code == 200:
            print("\n✅ Order accepted!")
        else:
            print(f"\n❌ Order endpoint returned {response.status_code}")

    except httpx.HTTPError as e:
        print(f"❌ Error: {e}")


if __name__ == "__main__":
    asyncio.run(submit_order(sys.argv[1] if len(sys.argv) > 1 else BASE_URL))
