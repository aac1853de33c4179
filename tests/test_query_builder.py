"""Test XQuery construction."""

import logging
import pytest

from lewis_search.core.query_builder import QueryBuilder, build, select_mode
from lewis_search.core.exceptions import ValidationError
from lewis_search.models.request import QueryMode

LOCATOR = "reut2-003.xml"


class TestSelectMode:
    """Test query mode selection."""

    @pytest.mark.parametrize("identifier,search_term,expected", [
        ("", "", QueryMode.UNFILTERED),
        ("", "wheat", QueryMode.FULL_TEXT),
        ("TITLE", "wheat", QueryMode.TARGETED),
        ("TITLE", "", QueryMode.UNFILTERED),
    ])
    def test_mode_precedence(self, identifier, search_term, expected):
        assert select_mode(identifier, search_term) == expected


class TestBuild:
    """Test query text for each mode."""

    def test_unfiltered_query(self):
        """No identifier and no term selects every record."""
        query = build("", "", LOCATOR)

        assert query == "for $x in doc('reut2-003.xml')/LEWIS/REUTERS return $x"
        assert "where" not in query

    def test_full_text_query(self):
        """A term without identifier searches the whole record."""
        query = build("", "wheat", LOCATOR)

        assert query == (
            "for $x in doc('reut2-003.xml')/LEWIS/REUTERS"
            " where contains(string($x), 'wheat')"
            " return $x"
        )
        assert "//" not in query
        assert "@" not in query

    def test_targeted_query(self):
        """Identifier and term search elements or attributes of that name."""
        query = build("PLACES", "usa", LOCATOR)

        assert query.startswith("for $x in doc('reut2-003.xml')/LEWIS/REUTERS where ")
        assert query.endswith(" return $x")
        assert "$x//PLACES" in query
        assert "$x//@PLACES" in query
        assert query.count("'usa'") == 2
        assert " or " in query

    def test_targeted_clauses_are_or_combined(self):
        query = build("NEWID", "12", LOCATOR)
        where_clause = query.split(" where ", 1)[1].rsplit(" return ", 1)[0]

        node_clause, attribute_clause = where_clause.split(" or ")
        assert node_clause.startswith("(") and node_clause.endswith(")")
        assert attribute_clause.startswith("(") and attribute_clause.endswith(")")
        assert "$x//NEWID" in node_clause
        assert "$x//@NEWID" in attribute_clause

    def test_identifier_without_term_is_ignored(self):
        """An identifier alone falls back to the unfiltered query."""
        assert build("TOPICS", "", LOCATOR) == build("", "", LOCATOR)

    def test_filter_references_bound_variable(self):
        for identifier, term in [("", "oil"), ("BODY", "oil")]:
            query = build(identifier, term, LOCATOR)
            assert query.count("doc(") == 1
            assert "$x" in query.split(" where ", 1)[1]

    def test_repeated_builds_are_identical(self):
        assert build("TITLE", "crude", LOCATOR) == build("TITLE", "crude", LOCATOR)

    def test_custom_record_path(self):
        builder = QueryBuilder(record_path="/corpus/item/")
        query = builder.build("", "", "corpus.xml")

        assert query == "for $x in doc('corpus.xml')/corpus/item return $x"


class TestLiteralEscaping:
    """Test handling of quotes in search terms."""

    def test_quote_inserted_unescaped_by_default(self, caplog):
        with caplog.at_level(logging.WARNING, logger="lewis_search.core.query_builder"):
            query = build("", "Reagan's", LOCATOR)

        assert "contains(string($x), 'Reagan's')" in query
        assert "unescaped" in caplog.text

    def test_quote_doubled_when_escaping(self):
        builder = QueryBuilder(escape_literals=True)
        query = builder.build("", "Reagan's", LOCATOR)

        assert "contains(string($x), 'Reagan''s')" in query

    @pytest.mark.parametrize("term,literal", [
        ("AT&T", "'AT&amp;T'"),
        ("&amp;", "'&amp;amp;'"),
        ("&#39;s", "'&amp;#39;s'"),
    ])
    def test_ampersand_escaped_when_escaping(self, term, literal):
        builder = QueryBuilder(escape_literals=True)
        query = builder.build("TITLE", term, LOCATOR)

        assert f"contains(string($n), {literal})" in query
        assert f"contains(string($a), {literal})" in query

    def test_ampersand_inserted_unescaped_by_default(self):
        assert "contains(string($x), 'AT&T')" in build("", "AT&T", LOCATOR)

    def test_escaping_leaves_plain_terms_unchanged(self):
        builder = QueryBuilder(escape_literals=True)
        assert builder.build("TITLE", "oil", LOCATOR) == build("TITLE", "oil", LOCATOR)

    def test_invalid_identifier_rejected_when_escaping(self):
        builder = QueryBuilder(escape_literals=True)

        with pytest.raises(ValidationError, match="not a valid XML name"):
            builder.build("TITLE) or (1=1", "oil", LOCATOR)

    def test_invalid_identifier_accepted_by_default(self):
        query = build("TITLE) or (1=1", "oil", LOCATOR)
        assert "$x//TITLE) or (1=1" in query
