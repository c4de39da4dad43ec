#!/usr/bin/env python3
"""
Quick Start Guide for xml_tag_query.

Parses a small catalog and walks through the three kinds of pattern steps,
the strict and silent query forms, and the detailed parse result.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from xml_tag_query import (
    ParserConfig,
    QueryError,
    XMLTagParser,
    parse,
    parse_detailed,
    query,
    query_strict,
)

CATALOG = """
<catalog version="2">
  <book id="b1" lang="en">
    <title>Dune</title>
    <author>Herbert</author>
  </book>
  <book id="b2">
    <title>Solaris</title>
  </book>
</catalog>
"""


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - xml_tag_query")
    print("=" * 35)

    # Step 1: Parse
    print("\n📄 Step 1: Parsing")
    print("-" * 30)

    root = parse(CATALOG)
    print(f"✅ Root tag: {root.name} with {len(root.children)} children")
    print(f"📝 Root content: {root.content}")

    # Step 2: Query
    print("\n🔍 Step 2: Pattern Queries")
    print("-" * 30)

    for pattern in ("book/title", "[1]/title", "book/@lang", "@version"):
        print(f"  {pattern:<12} -> {query(root, pattern).content!r}")

    # Step 3: Errors
    print("\n⚠️  Step 3: Failed Queries")
    print("-" * 30)

    for pattern in ("book/price", "[7]", "[x]", "@missing"):
        try:
            query_strict(root, pattern)
        except QueryError as e:
            print(f"  {pattern:<12} -> {type(e).__name__}: {e}")

    # Step 4: Diagnostics for documents that do not parse
    print("\n🩺 Step 4: Parse Diagnostics")
    print("-" * 30)

    result = parse_detailed("<catalog><book></catalog>")
    print(f"✅ Success: {result.success}")
    for diagnostic in result.diagnostics:
        print(f"  - {diagnostic.severity.name}: {diagnostic.message} at {diagnostic.position}")

    # Step 5: Configured parser
    print("\n⚙️  Step 5: Configured Parser")
    print("-" * 30)

    parser = XMLTagParser(ParserConfig.plain_content())
    plain_root = parser.parse("<note>Remember <b>milk</b> and eggs</note>")
    print(f"  plain root content: {plain_root.content!r}")
    print(f"  statistics: {parser.statistics}")


if __name__ == "__main__":
    quick_start_example()
