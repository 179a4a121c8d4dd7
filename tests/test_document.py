"""
Tests for the knowledge document model and the product catalog.
"""

import pytest


class TestQuery:
    """Tests for Query."""

    def test_from_text(self):
        """Test the lowered and token forms."""
        from supportdesk.knowledge.document import Query

        query = Query.from_text("How Do I  Return it?")
        assert query.raw == "How Do I  Return it?"
        assert query.lowered == "how do i  return it?"
        assert query.tokens == ["how", "do", "i", "return", "it?"]

    def test_words_longer_than(self):
        """Test only tokens longer than the limit are kept."""
        from supportdesk.knowledge.document import Query

        query = Query.from_text("how long do refunds take")
        assert query.words(3) == ["long", "refunds", "take"]


class TestParseSections:
    """Tests for section segmentation."""

    def test_headers_and_separators(self):
        """Test ALL CAPS headers and === lines both open sections."""
        from supportdesk.knowledge.document import parse_sections

        text = "Intro line\n\n=== RETURN POLICY ===\nLine one\n\nREFUND PROCESS:\nLine two\n"
        sections = parse_sections(text)

        assert [s.header for s in sections] == [None, "=== RETURN POLICY ===", "REFUND PROCESS:"]
        assert sections[0].lines == ["Intro line"]
        assert sections[1].is_separator is True
        assert sections[2].text == "REFUND PROCESS:\nLine two\n"

    def test_mixed_case_line_is_not_header(self):
        """Test a line with lowercase letters stays in the body."""
        from supportdesk.knowledge.document import is_section_header

        assert is_section_header("TABLET:") is True
        assert is_section_header("Tablet:") is False
        assert is_section_header("=== FAQ ===") is True


class TestParseQAEntries:
    """Tests for Q&A extraction."""

    def test_multiline_answer(self, returns_text):
        """Test answers absorb continuation lines until a blank line."""
        from supportdesk.knowledge.document import parse_qa_entries

        entries = parse_qa_entries(returns_text)

        assert len(entries) == 2
        assert entries[0].question == "how do i return an item?"
        assert entries[0].answer == (
            "Log into your account and click Return Item. "
            "Print the prepaid label and drop the parcel at any courier location."
        )

    def test_question_without_answer_is_dropped(self):
        """Test a question closed by another question is discarded."""
        from supportdesk.knowledge.document import parse_qa_entries

        text = "Q: Orphan question?\nQ: Real question?\nA: Real answer.\n"
        entries = parse_qa_entries(text)

        assert [e.question for e in entries] == ["real question?"]

    def test_last_entry_without_trailing_blank(self):
        """Test the final pair is kept at end of text."""
        from supportdesk.knowledge.document import parse_qa_entries

        entries = parse_qa_entries("Q: Last?\nA: Yes")
        assert entries[0].answer == "Yes"


class TestKnowledgeDocument:
    """Tests for KnowledgeDocument."""

    def test_normalizes_crlf(self):
        """Test Windows line endings are normalized."""
        from supportdesk.knowledge.document import KnowledgeDocument

        doc = KnowledgeDocument(topic="returns", text="Q: A?\r\nA: B\r\n")
        assert "\r" not in doc.text
        assert doc.qa_entries[0].answer == "B"

    def test_lazy_parsing_is_reused(self, returns_text):
        """Test sections are parsed once."""
        from supportdesk.knowledge.document import KnowledgeDocument

        doc = KnowledgeDocument(topic="returns", text=returns_text)
        assert doc.sections is doc.sections
        assert doc.contains("REFUND PROCESS")
        assert len(doc) == len(returns_text)

    def test_split_paragraphs(self):
        """Test short paragraphs are dropped."""
        from supportdesk.knowledge.document import split_paragraphs

        text = "short\n\n" + "x" * 60 + "\n\n\n" + "y" * 51
        assert split_paragraphs(text, 50) == ["x" * 60, "y" * 51]


class TestCatalog:
    """Tests for the product warranty catalog."""

    @pytest.mark.parametrize("text,key", [
        ("what is tablet warranty period?", "tablet"),
        ("warranty for my tab", "tablet"),
        ("my wireless headphones broke", "galaxy buds"),
        ("is my watch strap covered", "watch strap"),
        ("OLED Monitor warranty", "oled monitor"),
        ("smart phone repair", "smartphone"),
    ])
    def test_match_product_longest_alias(self, text, key):
        """Test the longest alias wins."""
        from supportdesk.knowledge.catalog import match_product

        assert match_product(text).key == key

    def test_match_product_none(self):
        """Test text without a product alias."""
        from supportdesk.knowledge.catalog import match_product

        assert match_product("where is my parcel") is None

    def test_find_products_blanks_matched_aliases(self):
        """Test 'wireless headphones' is not also counted as a phone."""
        from supportdesk.knowledge.catalog import find_products

        keys = [r.key for r in find_products("Wireless Headphones and Tablet")]
        assert "galaxy buds" in keys
        assert "tablet" in keys
        assert "smartphone" not in keys

    def test_render_record(self):
        """Test a record renders in knowledge-text format."""
        from supportdesk.knowledge.catalog import get_record

        rendered = get_record("tablet").render()
        assert rendered.startswith("TABLET:\n- Warranty period: 24 Months\n")
        assert "- Repair services available: In-store repair, Pick up repair, Doorstep repair" in rendered

    def test_render_catalog_groups_by_family(self):
        """Test families appear as === headers in order."""
        from supportdesk.knowledge.catalog import render_catalog

        text = render_catalog()
        assert text.index("=== HOME APPLIANCES WARRANTY ===") < text.index("=== MOBILE DEVICES WARRANTY ===")
        assert "SMARTPHONE (including Certified Re-Newed model):" in text
        assert "WATCH STRAP:\n- Warranty period: 6 Months" in text

    def test_alias_table(self):
        """Test every record is in the alias table."""
        from supportdesk.knowledge.catalog import ALIAS_TABLE, PRODUCT_CATALOG

        assert set(ALIAS_TABLE) == {r.key for r in PRODUCT_CATALOG}
        assert "tab" in ALIAS_TABLE["tablet"]
