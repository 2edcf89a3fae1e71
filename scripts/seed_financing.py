#!/usr/bin/env python3
"""
Seed financing groups, plans and a small product catalog.

Features:
- Deterministic: fixed seed → same dataset every run
- Idempotent: safe to run multiple times (clears before seeding)
- Plans mirror the fallback table shown when the quote API is down,
  with group and price/category restrictions layered on top

Usage:
    python scripts/seed_financing.py
"""

from __future__ import annotations

import random
import sys
from decimal import Decimal
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from storefront.domain.fallback_plans import FALLBACK_PLANS
from storefront.infra.db.models import (
    FinancingGroupRow,
    FinancingPlanRow,
    OrderRow,
    ProductRow,
)
from storefront.infra.db.session import get_session


# ==============================================================================
# Configuration
# ==============================================================================

RANDOM_SEED = 42  # Fixed seed for deterministic results
NUM_PRODUCTS = 30


# ==============================================================================
# Catalog data
# ==============================================================================

GROUPS = [
    {"key": "default", "name": "General", "sort_order": 0},
    {"key": "celulares", "name": "Celulares", "sort_order": 1},
    {"key": "bicicletas", "name": "Bicicletas", "sort_order": 2},
]

# Legacy code -> (group_key, extra column values)
PLAN_OVERRIDES: dict[int, dict] = {
    10: {"min_price": Decimal("500000")},
    11: {"group_key": "celulares", "include_categories": ["celulares"]},
    6: {"group_key": "bicicletas", "include_categories": ["bicicletas"]},
}

PRODUCTS_BY_CATEGORY = {
    "celulares": {
        "titles": ["Samsung Galaxy A5", "Samsung Galaxy A3", "Motorola G54 5G", "Xiaomi Redmi 13"],
        "price_min": 180000,
        "price_max": 900000,
    },
    "bicicletas": {
        "titles": ["Bici MTB Rodado 29", "Bici Urbana Rodado 26", "Bici Plegable"],
        "price_min": 250000,
        "price_max": 1200000,
    },
    "electro": {
        "titles": ["Smart TV 50\"", "Heladera No Frost", "Lavarropas 8kg", "Microondas 20L"],
        "price_min": 120000,
        "price_max": 1500000,
    },
}


# ==============================================================================
# Seed Generation
# ==============================================================================


def build_plans() -> list[FinancingPlanRow]:
    rows = []
    for plan in FALLBACK_PLANS:
        values = {
            "code": plan.code,
            "description": plan.description,
            "months": plan.months,
            "surcharge_pct": plan.surcharge_pct,
            "group_key": "default",
            "active": True,
            "include_categories": [],
            "exclude_categories": [],
        }
        values.update(PLAN_OVERRIDES.get(plan.code or -1, {}))
        rows.append(FinancingPlanRow(**values))
    return rows


def generate_product(category: str) -> ProductRow:
    """Generate a single product; roughly a third are on sale."""
    data = PRODUCTS_BY_CATEGORY[category]
    price = Decimal(random.randint(data["price_min"], data["price_max"]) // 1000 * 1000)

    sales_price = None
    if random.random() < 0.3:
        sales_price = (price * Decimal("0.9")).quantize(Decimal("1"))

    financing_mode = "inherit"
    financing_group_key = None
    if category in ("celulares", "bicicletas"):
        financing_mode = "override"
        financing_group_key = category
    elif random.random() < 0.1:
        financing_mode = "disabled"

    return ProductRow(
        title=random.choice(data["titles"]),
        price=price,
        sales_price=sales_price,
        category=category,
        stock=random.randint(0, 20),
        is_deleted=False,
        financing_mode=financing_mode,
        financing_group_key=financing_group_key,
        financing_down_pct=None,
        financing_plan_ids=[],
    )


def seed_financing(num_products: int = NUM_PRODUCTS, seed: int = RANDOM_SEED) -> None:
    """
    Seed groups, plans and products.

    Args:
        num_products: Number of products to generate
        seed: Random seed for deterministic results
    """
    random.seed(seed)

    print(f"🌱 Seeding financing data and {num_products} products (seed={seed})...")

    with get_session() as session:
        # Step 1: Clear existing data (idempotent). Orders go first: their
        # snapshots reference plans and products.
        print("🗑️  Clearing existing data...")
        for model in (OrderRow, ProductRow, FinancingPlanRow, FinancingGroupRow):
            deleted_count = session.query(model).delete()
            print(f"   Deleted {deleted_count} rows from {model.__tablename__}")

        # Step 2: Groups and plans
        session.add_all([FinancingGroupRow(active=True, **group) for group in GROUPS])
        plans = build_plans()
        session.add_all(plans)

        # Step 3: Products
        categories = list(PRODUCTS_BY_CATEGORY)
        products = [generate_product(random.choice(categories)) for _ in range(num_products)]
        session.add_all(products)
        session.flush()

        print(f"✅ Seeded {len(GROUPS)} groups, {len(plans)} plans, {len(products)} products")

        print("\n📊 Plans:")
        for plan in sorted(plans, key=lambda p: (p.months, p.surcharge_pct)):
            print(
                f"   [{plan.code}] {plan.description} - {plan.months} cuotas, "
                f"+{plan.surcharge_pct:.2%} ({plan.group_key})"
            )


# ==============================================================================
# Main
# ==============================================================================


if __name__ == "__main__":
    try:
        seed_financing()
    except Exception as e:
        print(f"❌ Error seeding database: {e}", file=sys.stderr)
        sys.exit(1)
