from __future__ import annotations

from detailerdash.domain.entities.service import Service, ServiceCategory

DEMO_SERVICES: list[Service] = [
    Service(
        id="full-detail",
        name="Full Detail",
        description="Complete interior and exterior detailing",
        duration_minutes=180,
        base_price_cents=15000,
        category=ServiceCategory.detailing,
    ),
    Service(
        id="express-wash",
        name="Express Wash",
        description="Quick exterior wash and dry",
        duration_minutes=30,
        base_price_cents=2500,
        category=ServiceCategory.wash,
    ),
    Service(
        id="interior-refresh",
        name="Interior Refresh",
        description="Vacuum, shampoo and stain treatment for seats and carpets",
        duration_minutes=90,
        base_price_cents=8000,
        category=ServiceCategory.interior,
    ),
    Service(
        id="ceramic-coating",
        name="Ceramic Coating",
        description="Multi-year hydrophobic paint protection",
        duration_minutes=300,
        base_price_cents=60000,
        category=ServiceCategory.ceramic,
    ),
    Service(
        id="paint-correction",
        name="Paint Correction",
        description="Machine polish to remove swirls and light scratches",
        duration_minutes=240,
        base_price_cents=35000,
        category=ServiceCategory.paint,
    ),
]
