"""Basic usage example for the Lewis search service."""

import asyncio
from pathlib import Path

from lewis_search import LewisSearchService, SearchRequest

SAMPLE_FILE = Path(__file__).parent / "sample_data" / "reut2-sample.xml"


async def basic_search_demo():
    """Demonstrate the three query modes."""
    print("Reuters News Corpus Search - Basic Usage Demo")
    print("=" * 50)

    if not SAMPLE_FILE.exists():
        print("   Generating sample data...")
        from sample_data.generate_sample_data import save_sample_collection
        save_sample_collection(SAMPLE_FILE)

    async with LewisSearchService.create(
        collection_path=SAMPLE_FILE,
        log_level="WARNING"
    ) as service:

        searches = [
            ("", ""),
            ("", "wheat"),
            ("D", "japan"),
            ("LEWISSPLIT", "TEST"),
            ("TOPICS", ""),
        ]

        for identifier, term in searches:
            response = await service.search_request(SearchRequest(identifier, term))
            print(f"\nid={identifier!r} content={term!r} -> {response.mode.value}")
            print(f"   {response.fragment_count} records in {response.search_time:.3f}s")
            print(f"   {response.query}")

        document = await service.search("TITLE", "CRUDE")
        print("\nFirst 300 characters of a response document:")
        print(document[:300])

        stats = await service.get_stats()
        print(f"\nTotal searches: {stats['engine']['total_searches']}")


if __name__ == "__main__":
    asyncio.run(basic_search_demo())
