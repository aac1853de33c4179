"""Pytest configuration and shared fixtures."""

import re
import threading
import time
import xml.etree.ElementTree as ET
import pytest
from pathlib import Path
from typing import Iterator, List, Optional

from lewis_search.core.xquery import XQueryEngine, PreparedQuery
from lewis_search.core.engine import LewisSearchEngine
from lewis_search.core.exceptions import QueryError, EvaluationError
from lewis_search.api.service import LewisSearchService


SAMPLE_COLLECTION = """<?xml version="1.0" encoding="UTF-8"?>
<LEWIS>
<REUTERS TOPICS="YES" LEWISSPLIT="TRAIN" CGISPLIT="TRAINING-SET" OLDID="5544" NEWID="1">
<DATE>26-FEB-1987 15:01:01.79</DATE>
<TOPICS><D>grain</D><D>wheat</D></TOPICS>
<PLACES><D>usa</D></PLACES>
<TEXT TYPE="NORM"><TITLE>U.S. GRAIN OUTLOOK</TITLE><BODY>Inspections for wheat export rose last week.</BODY></TEXT>
</REUTERS>
<REUTERS TOPICS="YES" LEWISSPLIT="TEST" CGISPLIT="TRAINING-SET" OLDID="5545" NEWID="2">
<DATE>26-FEB-1987 15:02:20.00</DATE>
<TOPICS><D>crude</D></TOPICS>
<PLACES><D>uk</D></PLACES>
<TEXT TYPE="NORM"><TITLE>NORTH SEA CRUDE FIRM</TITLE><BODY>Crude oil prices held firm in quiet trading.</BODY></TEXT>
</REUTERS>
<REUTERS TOPICS="NO" LEWISSPLIT="TRAIN" CGISPLIT="TRAINING-SET" OLDID="5546" NEWID="3">
<DATE>26-FEB-1987 15:03:27.51</DATE>
<TOPICS></TOPICS>
<PLACES><D>japan</D><D>usa</D></PLACES>
<TEXT TYPE="BRIEF"><TITLE>TOKYO STOCKS CLOSE HIGHER</TITLE></TEXT>
</REUTERS>
</LEWIS>
"""


class StaticXQueryEngine(XQueryEngine):
    """Engine returning the same fragments for every query."""

    def __init__(
        self,
        fragments: Optional[List[str]] = None,
        fail_after: Optional[int] = None,
        prepare_error: Optional[str] = None,
        delay: float = 0.0
    ):
        self.fragments = list(fragments or [])
        self.fail_after = fail_after
        self.prepare_error = prepare_error
        self.delay = delay
        self.queries: List[str] = []
        self.closed_cursors = 0
        self.cursor_closed = threading.Event()
        self.closed = False

    def prepare(self, query: str) -> PreparedQuery:
        self.queries.append(query)
        if self.prepare_error:
            raise QueryError(self.prepare_error)
        return PreparedQuery(text=query)

    def execute(self, prepared: PreparedQuery) -> Iterator[str]:
        return self._cursor()

    def _cursor(self) -> Iterator[str]:
        try:
            for position, fragment in enumerate(self.fragments):
                if self.fail_after is not None and position == self.fail_after:
                    raise EvaluationError(f"Engine fault at item {position}")
                if self.delay:
                    time.sleep(self.delay)
                yield fragment
        finally:
            self.closed_cursors += 1
            self.cursor_closed.set()

    def close(self) -> None:
        self.closed = True


class TreeXQueryEngine(XQueryEngine):
    """Engine evaluating the three query shapes over an ElementTree."""

    FOR_PATTERN = re.compile(r"^for \$x in doc\('(?P<locator>[^']*)'\)/LEWIS/REUTERS")
    FULL_TEXT_PATTERN = re.compile(r" where contains\(string\(\$x\), '(?P<term>.*)'\) return \$x$")
    TARGETED_PATTERN = re.compile(
        r" where \(some \$n in \$x//(?P<name>\S+) satisfies contains\(string\(\$n\), '(?P<term>.*)'\)\)"
        r" or \(some \$a in \$x//@(?P=name) satisfies contains\(string\(\$a\), '(?P=term)'\)\) return \$x$"
    )

    def __init__(self, source: str):
        self.root = ET.fromstring(source.split("?>", 1)[-1].strip())
        self.queries: List[str] = []

    def prepare(self, query: str) -> PreparedQuery:
        self.queries.append(query)
        if not self.FOR_PATTERN.match(query) or not query.endswith(" return $x"):
            raise QueryError(f"Unsupported query: {query}")
        return PreparedQuery(text=query)

    def execute(self, prepared: PreparedQuery) -> Iterator[str]:
        query = prepared.text
        records = self.root.findall("REUTERS")

        full_text = self.FULL_TEXT_PATTERN.search(query)
        targeted = self.TARGETED_PATTERN.search(query)

        if full_text:
            term = full_text.group("term")
            records = [r for r in records if term in "".join(r.itertext())]
        elif targeted:
            name, term = targeted.group("name"), targeted.group("term")
            records = [r for r in records if self._matches(r, name, term)]

        return (self._serialize(r) for r in records)

    @staticmethod
    def _matches(record: ET.Element, name: str, term: str) -> bool:
        for element in record.iter():
            if element is not record and element.tag == name and term in "".join(element.itertext()):
                return True
            value = element.get(name)
            if value is not None and term in value:
                return True
        return False

    @staticmethod
    def _serialize(record: ET.Element) -> str:
        copy = ET.fromstring(ET.tostring(record, encoding="unicode"))
        copy.tail = None
        return ET.tostring(copy, encoding="unicode")


@pytest.fixture
def sample_collection(tmp_path) -> Path:
    """Write the sample collection to a temporary XML file."""
    path = tmp_path / "reut2-sample.xml"
    path.write_text(SAMPLE_COLLECTION, encoding="utf-8")
    return path


@pytest.fixture
def tree_engine() -> TreeXQueryEngine:
    return TreeXQueryEngine(SAMPLE_COLLECTION)


@pytest.fixture
def static_engine_factory():
    """Factory for engines with fixed fragments and injected faults."""
    return StaticXQueryEngine


@pytest.fixture
def search_engine(tree_engine, sample_collection) -> LewisSearchEngine:
    """Search engine over the sample collection."""
    return LewisSearchEngine(
        xquery_engine=tree_engine,
        collection_path=sample_collection
    )


@pytest.fixture
async def search_service(tree_engine, sample_collection):
    """Create and initialize a search service for testing."""
    async with LewisSearchService.create(
        collection_path=sample_collection,
        xquery_engine=tree_engine,
        max_workers=2,
        log_level="WARNING"  # Reduce test output
    ) as service:
        yield service


@pytest.fixture
def tree_engine_factory():
    """Factory for tree engines over arbitrary collections."""
    return TreeXQueryEngine
