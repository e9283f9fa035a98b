# generate_data.py
import json
import random
import argparse
from pathlib import Path
from faker import Faker

# Setup argument parser
parser = argparse.ArgumentParser(description="Generate a dummy product source for /seed-data.")
parser.add_argument("--rows", type=int, default=60, help="Number of products to generate")
parser.add_argument("--output", type=Path, default=Path("dummy_products.json"), help="Where to write the JSON array")
args = parser.parse_args()

CATEGORIES = ["men's clothing", "women's clothing", "jewelery", "electronics"]

fake = Faker()

products = []
for product_id in range(1, args.rows + 1):
    products.append({
        "id": product_id,
        "title": fake.catch_phrase(),
        "price": round(random.uniform(5.0, 1000.0), 2),  # nosec B311
        "description": fake.sentence(nb_words=12),
        "category": random.choice(CATEGORIES),  # nosec B311
        "image": fake.image_url(),
        "sold": fake.boolean(),
        "dateOfSale": fake.date_time_between(start_date="-1y", end_date="now").isoformat() + "Z",
    })

args.output.write_text(json.dumps(products, indent=2), encoding="utf-8")
print(f"Wrote {len(products)} products to {args.output}")
print(f"Seed from it with SEED_SOURCE_URL={args.output.resolve()}")
