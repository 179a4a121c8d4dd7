"""
Live Source Fetcher Module

Downloads the public warranty and product pages and turns them into the
normalized knowledge text the extraction engine understands: product
sections with a warranty period, service sentence and repair list, followed
by harvested ``Q:``/``A:`` pairs and a few fixed information sections.

If a warranty page is fetched but no product records can be recognized in
it, the hard-coded catalog is rendered instead, so a successful fetch never
yields an empty corpus.

Failures (network, timeout, HTTP status, unusable body) propagate to the
caller; the knowledge cache decides what to fall back to.

Usage:
    from supportdesk.core.fetcher import LiveSourceFetcher

    fetcher = LiveSourceFetcher()
    text = fetcher.fetch_warranty()
"""

import time
from typing import Callable, Dict, List, Optional

import requests
from bs4 import BeautifulSoup, Tag

from supportdesk.config import settings
from supportdesk.exceptions import FetchError
from supportdesk.knowledge.catalog import (
    PRODUCT_CATALOG,
    ProductWarrantyRecord,
    find_products,
    render_catalog,
)
from supportdesk.knowledge.document import QAEntry
from supportdesk.logger import get_logger

logger = get_logger(__name__)

MAX_FAQS = 20
QUESTION_STARTERS = ("what", "how", "can", "which", "does", "will")
WARRANTY_SIGNALS = ("warranty period", "months")
PRODUCT_KEYWORDS = ("galaxy", "samsung", "tab", "watch", "buds")

WARRANTY_PREAMBLE = (
    "SAMSUNG WARRANTY INFORMATION - COMPREHENSIVE GUIDE\n\n"
    "=== STANDARD WARRANTY ===\n"
    "All Samsung products come with a standard manufacturer's warranty.\n\n"
)

WARRANTY_APPENDIX = (
    "=== GENERAL WARRANTY INFORMATION ===\n"
    "To obtain warranty service, the original proof of purchase will be required and the "
    "serial number affixed to the product must be complete and undamaged.\n"
    "The warranty covers defects in materials and workmanship.\n"
    "You can register your Samsung product online through My Page to receive faster support.\n\n"
    "=== TROUBLESHOOTING AND REPAIRS ===\n"
    "Need help with your product? Try our online troubleshooter to resolve the problem. "
    "If it hasn't solved the issue you're experiencing, you can book a repair online too.\n\n"
    "=== CONTACT INFORMATION ===\n"
    "For support buying a product, help with an order or technical product support, please "
    "contact Samsung using the details in the Contact Us section.\n"
    "Troubleshoot and book a repair: https://www.samsung.com/uk/support/repair/\n"
    "Contact us: https://www.samsung.com/uk/support/contact/\n"
)

PRODUCT_CATEGORIES = (
    "=== PRODUCT CATEGORIES ===\n"
    "- Mobile: Galaxy Smartphone, Galaxy Tab, Galaxy Book, Galaxy Watch, Galaxy Buds, Galaxy Ring\n"
    "- TV & AV: Neo QLED, OLED, QLED, Crystal UHD, The Frame, Sound Devices\n"
    "- Appliances: Refrigerators, Ovens, Microwaves, Dishwashers, Laundry, Vacuums\n"
    "- Computers & Monitors: Galaxy Book, Monitors, Memory & Storage\n"
    "- Wearables: Galaxy Watch, Galaxy Buds, Galaxy Ring\n"
    "- Accessories: Various accessories for all product categories\n"
)


def _node_text(node: Optional[Tag]) -> str:
    if node is None:
        return ""
    return node.get_text(" ", strip=True)


def _retry_after_seconds(response: requests.Response) -> Optional[float]:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None


def looks_like_question(text: str) -> bool:
    """A question mark anywhere, or a leading what/how/can/which/does/will."""
    lowered = text.lower()
    return "?" in lowered or lowered.startswith(QUESTION_STARTERS)


class LiveSourceFetcher:
    """
    Fetches and normalizes the live warranty and product pages.

    Features:
    - Bounded timeout on every request
    - One-shot retry when the source answers 503 with a Retry-After header,
      waiting no longer than the request timeout
    - Catalog substitution when no product records are recognized

    Example:
        fetcher = LiveSourceFetcher(timeout=5)
        warranty_text = fetcher.fetch_warranty()
        products_text = fetcher.fetch_products()
    """

    def __init__(
        self,
        warranty_url: Optional[str] = None,
        products_url: Optional[str] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        catalog: Optional[List[ProductWarrantyRecord]] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """
        Args:
            warranty_url: Warranty page URL (defaults to settings)
            products_url: Products page URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            user_agent: User-Agent header (defaults to settings)
            catalog: Products to look for and to fall back to
            sleep: Waits before the warm-up retry (defaults to time.sleep)
        """
        self.warranty_url = warranty_url or settings.sources.warranty_url
        self.products_url = products_url or settings.sources.products_url
        self.timeout = timeout if timeout is not None else settings.sources.timeout_seconds
        self.user_agent = user_agent or settings.sources.user_agent
        self.catalog = catalog if catalog is not None else PRODUCT_CATALOG
        self._sleep = sleep or time.sleep

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }

    def _download(self, url: str, retried: bool = False) -> str:
        """
        GET a page and return its body.

        Raises:
            requests.RequestException: On network errors or HTTP error status
            FetchError: If the body is empty
        """
        logger.info(f"Fetching data from: {url}")
        response = requests.get(url, headers=self._headers, timeout=self.timeout)

        if response.status_code == 503 and not retried:
            delay = _retry_after_seconds(response)
            if delay is not None:
                delay = min(delay, self.timeout)
                logger.info(f"Source warming up, retrying once in {delay:g}s")
                self._sleep(delay)
                return self._download(url, retried=True)

        response.raise_for_status()
        if not response.text.strip():
            raise FetchError(f"Empty response body from {url}")
        return response.text

    # ------------------------------------------------------------------ warranty

    def fetch_warranty(self) -> str:
        """Download the warranty page and normalize it to knowledge text."""
        html = self._download(self.warranty_url)
        text = self.parse_warranty_page(html)
        logger.info("Successfully fetched warranty data from website")
        return text

    def parse_warranty_page(self, html: str) -> str:
        """Normalize warranty page HTML into knowledge text."""
        soup = BeautifulSoup(html, "html.parser")

        records = self.find_product_records(soup)
        if records:
            products = render_catalog(records)
        else:
            logger.info("No product records recognized, using the built-in catalog")
            products = render_catalog(self.catalog)

        parts = [WARRANTY_PREAMBLE, products, "=== WARRANTY FAQs ===\n\n"]
        for entry in self.harvest_faqs(soup):
            parts.append(f"Q: {entry.question}\nA: {entry.answer}\n\n")
        parts.append(WARRANTY_APPENDIX)
        return "".join(parts)

    def find_product_records(self, soup: BeautifulSoup) -> List[ProductWarrantyRecord]:
        """
        Products whose alias appears next to a warranty-period signal.

        A text node counts when its parent's text or its next sibling's text
        mentions "warranty period" or "months". Each product is emitted once,
        in page order.
        """
        allowed = {record.key for record in self.catalog}
        found: List[ProductWarrantyRecord] = []

        for elem in soup.select("strong, h3, h4, li, p"):
            text = _node_text(elem)
            if not text:
                continue
            mentioned = [r for r in find_products(text) if r.key in allowed and r not in found]
            if not mentioned:
                continue
            nearby = f"{_node_text(elem.parent)} {_node_text(elem.find_next_sibling())}".lower()
            if any(signal in nearby for signal in WARRANTY_SIGNALS):
                found.extend(mentioned)

        logger.debug(f"Recognized product records: {[r.key for r in found]}")
        return found

    def harvest_faqs(self, soup: BeautifulSoup, limit: int = MAX_FAQS) -> List[QAEntry]:
        """
        Pair question-like clickable/heading elements with the text that follows.

        The answer is the next sibling's text, or else the parent's next
        sibling's text, if it is 20 to 1000 characters long.
        """
        faqs: List[QAEntry] = []
        for elem in soup.select('button, [role="button"], h2, h3'):
            question = _node_text(elem)
            if not (10 < len(question) < 200) or not looks_like_question(question):
                continue

            answer = _node_text(elem.find_next_sibling())
            if not (20 < len(answer) < 1000):
                parent = elem.parent
                answer = _node_text(parent.find_next_sibling()) if isinstance(parent, Tag) else ""
                if not (20 < len(answer) < 1000):
                    continue

            faqs.append(QAEntry(question=question, answer=answer))
            if len(faqs) >= limit:
                break
        return faqs

    # ------------------------------------------------------------------ products

    def fetch_products(self) -> str:
        """Download the products page and normalize it to knowledge text."""
        html = self._download(self.products_url)
        text = self.parse_products_page(html)
        logger.info("Successfully fetched product data from website")
        return text

    def parse_products_page(self, html: str) -> str:
        """Featured product names plus the fixed category list."""
        soup = BeautifulSoup(html, "html.parser")
        featured: List[str] = []

        for elem in soup.select('h2, h3, [class*="product"], [class*="galaxy"]'):
            text = _node_text(elem)
            if not (3 < len(text) < 100) or text in featured:
                continue
            if any(keyword in text.lower() for keyword in PRODUCT_KEYWORDS):
                featured.append(text)

        lines = ["SAMSUNG PRODUCTS INFORMATION\n\n", "=== FEATURED PRODUCTS ===\n"]
        lines.extend(f"- {name}\n" for name in featured)
        lines.append("\n")
        lines.append(PRODUCT_CATEGORIES)
        return "".join(lines)
