"""XQuery construction for the Lewis news-wire collection."""

import logging
from typing import Union
from pathlib import Path

from ..models.request import SearchRequest, QueryMode
from ..utils.validators import validate_identifier

logger = logging.getLogger(__name__)

# Every record is a <REUTERS> element directly under the <LEWIS> root.
DEFAULT_RECORD_PATH = "LEWIS/REUTERS"

XQUERY_FOR = "for $x in doc('{locator}')/{record_path}"
XQUERY_CONTAINS_ALL = "contains(string($x), '{term}')"
# string() on more than one node is a type error, so each name is tested node by node
XQUERY_CONTAINS_NODE = "(some $n in $x//{identifier} satisfies contains(string($n), '{term}'))"
XQUERY_CONTAINS_ATTRIBUTE = "(some $a in $x//@{identifier} satisfies contains(string($a), '{term}'))"
XQUERY_WHERE = " where "
XQUERY_OR = " or "
XQUERY_RETURN = " return $x"

QUOTE = "'"
AMPERSAND = "&"


def select_mode(identifier: str, search_term: str) -> QueryMode:
    """
    Select the query mode for an identifier/search term pair.

    An identifier without a search term selects every record; the
    identifier is ignored in that case.
    """
    return SearchRequest(identifier=identifier, search_term=search_term).mode


class QueryBuilder:
    """
    Builds XQuery expressions over the news-wire collection.

    The default builder splices identifier and search term into the query
    text as given. A value containing a single quote closes the string
    literal early and changes the query, so callers exposed to untrusted
    input should use ``escape_literals=True``. It doubles quotes and escapes
    ampersands in the search term, so entity and character references are
    matched as text, and it rejects identifiers that are not XML names.
    """

    def __init__(
        self,
        record_path: str = DEFAULT_RECORD_PATH,
        escape_literals: bool = False
    ):
        """
        Initialize query builder.

        Args:
            record_path: Path from the document node to each record element
            escape_literals: Escape the search term and validate the identifier
        """
        self.record_path = record_path.strip("/")
        self.escape_literals = escape_literals

    def build(
        self,
        identifier: str,
        search_term: str,
        collection_locator: Union[str, Path]
    ) -> str:
        """
        Build the XQuery for one search.

        Args:
            identifier: Element or attribute name to search in ("" = whole record)
            search_term: Text to search for ("" = no filter)
            collection_locator: Location of the XML collection, passed to doc()

        Returns:
            XQuery text: a for clause over the records, an optional where
            clause on ``$x`` and a return clause

        Raises:
            ValidationError: Only with ``escape_literals`` and an invalid identifier
        """
        mode = select_mode(identifier, search_term)

        if identifier and mode == QueryMode.UNFILTERED:
            logger.debug(f"No search term given, ignoring identifier '{identifier}'")

        term = self._literal(search_term)

        parts = [XQUERY_FOR.format(locator=collection_locator, record_path=self.record_path)]

        if mode == QueryMode.FULL_TEXT:
            parts.append(XQUERY_WHERE)
            parts.append(XQUERY_CONTAINS_ALL.format(term=term))
        elif mode == QueryMode.TARGETED:
            if self.escape_literals:
                validate_identifier(identifier)
            parts.append(XQUERY_WHERE)
            parts.append(XQUERY_CONTAINS_NODE.format(identifier=identifier, term=term))
            parts.append(XQUERY_OR)
            parts.append(XQUERY_CONTAINS_ATTRIBUTE.format(identifier=identifier, term=term))

        parts.append(XQUERY_RETURN)
        query = "".join(parts)

        logger.debug(f"Built {mode.value} query: {query}")
        return query

    def _literal(self, value: str) -> str:
        """Render a value for use inside a single-quoted string literal."""
        if self.escape_literals:
            # XQuery expands references like &amp; inside string literals
            return value.replace(AMPERSAND, "&amp;").replace(QUOTE, QUOTE * 2)

        if QUOTE not in value:
            return value

        logger.warning(
            "Search term contains a quote and is inserted unescaped; "
            "the resulting query may not match the intended records"
        )
        return value


_default_builder = QueryBuilder()


def build(identifier: str, search_term: str, collection_locator: Union[str, Path]) -> str:
    """Build a query with the default (unescaped) builder."""
    return _default_builder.build(identifier, search_term, collection_locator)
