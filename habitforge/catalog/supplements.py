"""Supplement stack priced at each cost tier (monthly USD)."""

from habitforge.domain.metrics import CostTier, PricedBrand, Supplement


_AMAZON = "https://amazon.com"


def _tiers(premium: PricedBrand, budget: PricedBrand, ultra_budget: PricedBrand) -> dict[CostTier, PricedBrand]:
    return {CostTier.PREMIUM: premium, CostTier.BUDGET: budget, CostTier.ULTRA_BUDGET: ultra_budget}


SUPPLEMENTS: tuple[Supplement, ...] = (
    Supplement(
        id="omega3",
        name="Omega-3 Fish Oil",
        tiers=_tiers(
            PricedBrand(brand="Nordic Naturals Ultimate", price=45, link=_AMAZON),
            PricedBrand(brand="NOW Foods Ultra Omega-3", price=18, link=_AMAZON),
            PricedBrand(brand="Kirkland Signature", price=12, link="https://costco.com"),
        ),
    ),
    Supplement(
        id="vitaminD",
        name="Vitamin D3 + K2",
        tiers=_tiers(
            PricedBrand(brand="Thorne D/K2", price=30, link=_AMAZON),
            PricedBrand(brand="NOW Foods D3/K2", price=15, link=_AMAZON),
            PricedBrand(brand="Nutricost D3/K2", price=10, link=_AMAZON),
        ),
    ),
    Supplement(
        id="magnesium",
        name="Magnesium Complex",
        tiers=_tiers(
            PricedBrand(brand="BiOptimizers Magnesium", price=40, link=_AMAZON),
            PricedBrand(brand="NOW Foods Magnesium", price=12, link=_AMAZON),
            PricedBrand(brand="Nature Made", price=8, link=_AMAZON),
        ),
    ),
    Supplement(
        id="creatine",
        name="Creatine Monohydrate",
        tiers=_tiers(
            PricedBrand(brand="Thorne Creatine", price=35, link=_AMAZON),
            PricedBrand(brand="NOW Sports Creatine", price=15, link=_AMAZON),
            PricedBrand(brand="BulkSupplements", price=10, link=_AMAZON),
        ),
    ),
    Supplement(
        id="collagen",
        name="Collagen Peptides",
        tiers=_tiers(
            PricedBrand(brand="Vital Proteins", price=45, link=_AMAZON),
            PricedBrand(brand="Sports Research", price=25, link=_AMAZON),
            PricedBrand(brand="BulkSupplements", price=18, link=_AMAZON),
        ),
    ),
    Supplement(
        id="nmn",
        name="NMN (Longevity)",
        tiers=_tiers(
            PricedBrand(brand="ProHealth NMN Pro", price=75, link=_AMAZON),
            PricedBrand(brand="Double Wood NMN", price=40, link=_AMAZON),
            PricedBrand(brand="Skip (optional)", price=0),
        ),
    ),
    Supplement(
        id="ashwagandha",
        name="Ashwagandha",
        tiers=_tiers(
            PricedBrand(brand="Nootropics Depot KSM-66", price=25, link=_AMAZON),
            PricedBrand(brand="NOW Foods Ashwagandha", price=12, link=_AMAZON),
            PricedBrand(brand="Nutricost", price=8, link=_AMAZON),
        ),
    ),
    Supplement(
        id="zinc",
        name="Zinc",
        tiers=_tiers(
            PricedBrand(brand="Thorne Zinc Picolinate", price=15, link=_AMAZON),
            PricedBrand(brand="NOW Foods Zinc", price=8, link=_AMAZON),
            PricedBrand(brand="Nature Made", price=5, link=_AMAZON),
        ),
    ),
    Supplement(
        id="probiotics",
        name="Probiotics",
        tiers=_tiers(
            PricedBrand(brand="Seed Daily Synbiotic", price=50, link="https://seed.com"),
            PricedBrand(brand="Garden of Life", price=30, link=_AMAZON),
            PricedBrand(brand="Culturelle", price=20, link=_AMAZON),
        ),
    ),
)

FULL_STACK_IDS: tuple[str, ...] = tuple(s.id for s in SUPPLEMENTS)

TIER_LABELS: dict[CostTier, str] = {
    CostTier.PREMIUM: "Premium",
    CostTier.BUDGET: "Budget",
    CostTier.ULTRA_BUDGET: "Ultra",
}
