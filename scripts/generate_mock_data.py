import json
from datetime import date, timedelta

import numpy as np
import pandas as pd

DELIVERY_CHARGE_IN_PENCE = 100

PIZZA_NAMES = [
    "Margarita", "Calzone", "Meat Lover", "Vegan Delight", "Super Cheese",
    "All Meat", "Vegetarian", "Hawaiian", "Pepperoni", "Four Seasons",
]


def generate_mock_day(
    order_date="2025-01-27",
    num_orders=40,
    num_restaurants=5,
    invalid_share=0.1,
    seed=None,
    output_file=None,
):
    """
    Generates a realistic day in the REST service JSON shape (restaurants + orders)
    for local runs of the planner against a stub server.
    Every restaurant gets its own two-pizza menu so most orders map to exactly one
    restaurant; a share of orders is deliberately broken (wrong total) to exercise
    the INVALID path.
    """
    rng = np.random.RandomState(seed)

    # Center around Edinburgh, just outside the central area
    CENTER_LNG = -3.186874
    CENTER_LAT = 55.944494

    # 1. Generate restaurants with disjoint menus
    restaurants = []
    for restaurant_index in range(num_restaurants):
        names = [PIZZA_NAMES[(2 * restaurant_index + k) % len(PIZZA_NAMES)] for k in range(2)]
        restaurants.append({
            "name": f"Restaurant {restaurant_index + 1}",
            "location": {
                "lng": float(np.round(CENTER_LNG + rng.uniform(-0.01, 0.01), 6)),
                "lat": float(np.round(CENTER_LAT + rng.uniform(-0.01, 0.01), 6)),
            },
            "openingDays": ["MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY"],
            "menu": [
                {"name": f"R{restaurant_index + 1}: {name}", "priceInPence": int(rng.randint(900, 1500))}
                for name in names
            ],
        })

    # 2. Generate orders
    expiry = date.fromisoformat(order_date) + timedelta(days=365)
    orders = []
    for order_index in range(num_orders):
        restaurant = restaurants[rng.randint(0, num_restaurants)]
        count = int(rng.randint(1, 5))
        pizzas = [restaurant["menu"][rng.randint(0, len(restaurant["menu"]))] for _ in range(count)]
        total = sum(p["priceInPence"] for p in pizzas) + DELIVERY_CHARGE_IN_PENCE
        if rng.random_sample() < invalid_share:
            total += 1

        orders.append({
            "orderNo": f"{order_index + 1:08X}",
            "orderDate": order_date,
            "orderStatus": "UNDEFINED",
            "orderValidationCode": "UNDEFINED",
            "priceTotalInPence": total,
            "pizzasInOrder": pizzas,
            "creditCardInformation": {
                "creditCardNumber": "".join(str(d) for d in rng.randint(0, 10, size=16)),
                "creditCardExpiry": expiry.strftime("%m/%y"),
                "cvv": "".join(str(d) for d in rng.randint(0, 10, size=3)),
            },
        })

    day = {"restaurants": restaurants, "orders": orders}

    # 3. Save to JSON
    if output_file:
        with open(output_file, "w") as file:
            json.dump(day, file, indent=2)
        print(f"✅ Generated {num_orders} orders and saved to '{output_file}'")

    # Print a quick preview of restaurant load
    df = pd.DataFrame(
        [{"orderNo": o["orderNo"], "restaurant": o["pizzasInOrder"][0]["name"].split(":")[0]} for o in orders]
    )
    if not df.empty:
        print("\nTop 5 Restaurants (order load):")
        counts = df["restaurant"].value_counts().head(5)
        for name, count in counts.items():
            print(f"  {name}: {count} orders")

    return day


if __name__ == "__main__":
    generate_mock_day(num_orders=40, num_restaurants=5, output_file="mock_day.json")
