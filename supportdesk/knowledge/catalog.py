"""
Product Warranty Catalog

The canonical list of product categories, their alias sets and their known
warranty terms. It serves three purposes:

- the alias table used to recognise a product in a customer query;
- the vocabulary the live fetcher scans a warranty page for;
- the hard-coded corpus substituted when a live page yields no records.

Usage:
    from supportdesk.knowledge.catalog import match_product

    record = match_product("what is the tab warranty?")
    print(record.key, record.period)  # tablet 24 Months
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

SERVICE_SENTENCE = (
    "Our Samsung Authorised Service Partners offer both In and Out of warranty repairs."
)

FULL_SERVICE = ("In-store repair", "Pick up repair", "Doorstep repair")
CARRY_IN_SERVICE = ("In-store repair", "Pick up repair")
PICK_UP_SERVICE = ("Pick up repair",)


@dataclass(frozen=True)
class ProductWarrantyRecord:
    """
    Warranty terms for one product category.

    Attributes:
        key: Canonical product key (lowercase)
        aliases: Lowercase synonyms matched by substring containment
        period: Warranty period string, e.g. "24 Months"
        repair_services: Repair services offered for the product family
        family: Catalog section the product is listed under
        title: Header text used when rendering the record
        service: Warranty service sentence
    """
    key: str
    aliases: Tuple[str, ...]
    period: str
    repair_services: Tuple[str, ...]
    family: str
    title: str = ""
    service: str = SERVICE_SENTENCE

    @property
    def header(self) -> str:
        """Section header line for this record."""
        return f"{self.title or self.key.upper()}:"

    @property
    def months(self) -> int:
        """Warranty length as an integer number of months."""
        return int(self.period.split()[0])

    def matches(self, text: str) -> bool:
        """Case-insensitive alias containment check."""
        lowered = text.lower()
        return any(alias in lowered for alias in self.aliases)

    def render(self) -> str:
        """Render as a knowledge-text section."""
        return (
            f"{self.header}\n"
            f"- Warranty period: {self.period}\n"
            f"- Warranty service offered: {self.service}\n"
            f"- Repair services available: {', '.join(self.repair_services)}\n"
        )


HOME_APPLIANCES = "HOME APPLIANCES WARRANTY"
MOBILE_DEVICES = "MOBILE DEVICES WARRANTY"
ACCESSORIES = "ACCESSORIES WARRANTY"
DISPLAY_PRODUCTS = "DISPLAY PRODUCTS WARRANTY"

FAMILIES = (HOME_APPLIANCES, MOBILE_DEVICES, ACCESSORIES, DISPLAY_PRODUCTS)

PRODUCT_CATALOG: List[ProductWarrantyRecord] = [
    # Home appliances
    ProductWarrantyRecord(
        key="cooker hood", aliases=("cooker hood", "hood"),
        period="24 Months", repair_services=FULL_SERVICE, family=HOME_APPLIANCES,
    ),
    ProductWarrantyRecord(
        key="robotic vacuum cleaners",
        aliases=("robotic vacuum cleaner", "robotic vacuum", "robot vacuum"),
        period="24 Months", repair_services=FULL_SERVICE, family=HOME_APPLIANCES,
    ),
    ProductWarrantyRecord(
        key="vacuum cleaners", aliases=("vacuum cleaner", "vacuum"),
        period="24 Months", repair_services=FULL_SERVICE, family=HOME_APPLIANCES,
    ),
    # Mobile devices
    ProductWarrantyRecord(
        key="smartphone", aliases=("smartphone", "smart phone", "phone", "mobile"),
        period="24 Months", repair_services=FULL_SERVICE, family=MOBILE_DEVICES,
        title="SMARTPHONE (including Certified Re-Newed model)",
    ),
    ProductWarrantyRecord(
        key="tablet", aliases=("tablet", "tab"),
        period="24 Months", repair_services=FULL_SERVICE, family=MOBILE_DEVICES,
    ),
    ProductWarrantyRecord(
        key="galaxy buds",
        aliases=("galaxy buds", "wireless headphones", "headphones", "earbuds", "buds"),
        period="12 Months", repair_services=CARRY_IN_SERVICE, family=MOBILE_DEVICES,
        title="GALAXY BUDS AND WIRELESS HEADPHONES",
    ),
    ProductWarrantyRecord(
        key="galaxy watch",
        aliases=("galaxy watch", "gear smart watch", "smart watch", "smartwatch", "watch"),
        period="24 Months", repair_services=FULL_SERVICE, family=MOBILE_DEVICES,
        title="GALAXY AND GEAR SMART WATCH",
    ),
    ProductWarrantyRecord(
        key="galaxy ring", aliases=("galaxy ring", "smart ring"),
        period="12 Months", repair_services=PICK_UP_SERVICE, family=MOBILE_DEVICES,
    ),
    # Accessories
    ProductWarrantyRecord(
        key="charger", aliases=("charger",),
        period="12 Months", repair_services=CARRY_IN_SERVICE, family=ACCESSORIES,
    ),
    ProductWarrantyRecord(
        key="battery", aliases=("battery", "battery pack"),
        period="12 Months", repair_services=CARRY_IN_SERVICE, family=ACCESSORIES,
    ),
    ProductWarrantyRecord(
        key="wired headphones", aliases=("wired headphones", "wired earphones"),
        period="12 Months", repair_services=CARRY_IN_SERVICE, family=ACCESSORIES,
    ),
    ProductWarrantyRecord(
        key="watch strap", aliases=("watch strap", "watch band"),
        period="6 Months", repair_services=CARRY_IN_SERVICE, family=ACCESSORIES,
    ),
    ProductWarrantyRecord(
        key="s pen", aliases=("s pen", "s-pen", "stylus"),
        period="12 Months", repair_services=CARRY_IN_SERVICE, family=ACCESSORIES,
    ),
    # Display products
    ProductWarrantyRecord(
        key="large format display", aliases=("large format display", "lfd"),
        period="36 Months", repair_services=FULL_SERVICE, family=DISPLAY_PRODUCTS,
    ),
    ProductWarrantyRecord(
        key="set back box", aliases=("set back box", "set-back box", "sbb"),
        period="36 Months", repair_services=FULL_SERVICE, family=DISPLAY_PRODUCTS,
        title="SET BACK BOX - SBB",
    ),
    ProductWarrantyRecord(
        key="oled monitor", aliases=("oled monitor",),
        period="24 Months", repair_services=FULL_SERVICE, family=DISPLAY_PRODUCTS,
        title="OLED MONITOR (FOR CONSUMERS)",
    ),
    ProductWarrantyRecord(
        key="monitor", aliases=("monitor",),
        period="24 Months", repair_services=FULL_SERVICE, family=DISPLAY_PRODUCTS,
        title="MONITOR (FOR CONSUMERS)",
    ),
]


def build_alias_table(records: List[ProductWarrantyRecord]) -> Dict[str, Tuple[str, ...]]:
    """Map each canonical key to its alias set."""
    return {record.key: record.aliases for record in records}


ALIAS_TABLE: Dict[str, Tuple[str, ...]] = build_alias_table(PRODUCT_CATALOG)

_RECORDS_BY_KEY: Dict[str, ProductWarrantyRecord] = {r.key: r for r in PRODUCT_CATALOG}

# Longest alias first so "watch strap" wins over "watch" and
# "headphones" over "phone".
_ALIASES_BY_LENGTH: List[Tuple[str, ProductWarrantyRecord]] = sorted(
    ((alias, record) for record in PRODUCT_CATALOG for alias in record.aliases),
    key=lambda pair: len(pair[0]),
    reverse=True,
)


def get_record(key: str) -> Optional[ProductWarrantyRecord]:
    """Look up a catalog record by canonical key."""
    return _RECORDS_BY_KEY.get(key.lower())


def match_product(text: str) -> Optional[ProductWarrantyRecord]:
    """
    Find the product a piece of text refers to.

    Args:
        text: Free text, any case

    Returns:
        The record owning the longest alias contained in the text, or None
    """
    lowered = text.lower()
    for alias, record in _ALIASES_BY_LENGTH:
        if alias in lowered:
            return record
    return None


def find_products(text: str) -> List[ProductWarrantyRecord]:
    """
    Every product mentioned in a piece of text, in catalog alias order.

    A matched alias is blanked out before shorter aliases are tried, so
    "wireless headphones" does not also count as "phone".
    """
    remaining = text.lower()
    found: List[ProductWarrantyRecord] = []
    for alias, record in _ALIASES_BY_LENGTH:
        if alias in remaining:
            if record not in found:
                found.append(record)
            remaining = remaining.replace(alias, " ")
    return found


def render_catalog(records: Optional[List[ProductWarrantyRecord]] = None) -> str:
    """Render records grouped by family as knowledge text."""
    records = PRODUCT_CATALOG if records is None else records
    parts: List[str] = []
    for family in FAMILIES:
        members = [r for r in records if r.family == family]
        if not members:
            continue
        parts.append(f"=== {family} ===\n\n")
        for record in members:
            parts.append(record.render() + "\n")
    return "".join(parts)
