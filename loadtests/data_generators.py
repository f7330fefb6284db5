"""Faker-based data generators for Locust load test scenarios.

Payloads use the camelCase field names of the delivery API's request
schemas and stay inside the values the API accepts.
"""

import itertools
import random

from faker import Faker

fake = Faker("en_US")

_order_ids = itertools.count(random.randint(100_000, 900_000))

# Partner farms around the Bay Area
FARMS = [
    {"lat": 37.7749, "lng": -122.4194},
    {"lat": 37.8044, "lng": -122.2712},
    {"lat": 37.4419, "lng": -122.1430},
]

# Mostly serviceable destinations, with some out of coverage
SERVICEABLE_ZIPS = ["94102", "94103", "94107", "94110", "94115", "94117", "94122", "94601", "94704", "94301"]
FAR_ZIPS = ["90012", "92101", "95814"]
UNCOVERED_ZIPS = ["10001", "60614", "98101"]


def destination_zip() -> str:
    """80% local, 10% far in-state, 10% out of coverage."""
    roll = random.random()
    if roll < 0.8:
        return random.choice(SERVICEABLE_ZIPS)
    if roll < 0.9:
        return random.choice(FAR_ZIPS)
    return random.choice(UNCOVERED_ZIPS)


def farm_location() -> dict:
    return dict(random.choice(FARMS))


def order_id() -> int:
    return next(_order_ids)


def order_total() -> float:
    return round(random.uniform(12.0, 180.0), 2)


def line_items() -> list[dict]:
    flowers = ["Ranunculus bunch", "Sweet pea bouquet", "Dahlia stems", "Peony bundle", "Tulip wrap"]
    return [
        {
            "name": name,
            "quantity": random.randint(1, 4),
            "price": round(random.uniform(8.0, 45.0), 2),
        }
        for name in random.sample(flowers, k=random.randint(1, 3))
    ]


def options_request(zip_code: str | None = None, farm: dict | None = None) -> dict:
    return {
        "zipCode": zip_code or destination_zip(),
        "farmLocation": farm or farm_location(),
        "sortByFee": random.random() < 0.3,
    }


def order_context(order: int, total: float) -> dict:
    """DispatchRequest.orderContext payload."""
    return {
        "orderId": order,
        "totalAmount": total,
        "customerInfo": {
            "name": fake.name()[:100],
            "phone": fake.numerify("+1-###-###-####"),
            "address": fake.street_address(),
        },
        "farmInfo": {
            "name": f"{fake.last_name()} Flower Farm",
            "phone": fake.numerify("+1-###-###-####"),
            "address": fake.street_address(),
        },
        "items": line_items(),
    }
