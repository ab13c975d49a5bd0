#!/usr/bin/env python3
"""
Quick Start Guide for xmlx.

This example walks through parsing a document into a node tree and the
main ways of querying it: paths, predicates, recursive search, splitting
and flattening.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from xmlx import XMLNodeConfig, XMLNodeParser, parse

ORDERS = """<?xml version="1.0" encoding="UTF-8"?>
<orders region="eu">
  <order>
    <id>1001</id>
    <customer><name>Ada</name><country>UK</country></customer>
    <lines>
      <line><sku>A-1</sku><qty>2</qty></line>
      <line><sku>B-7</sku><qty>1</qty></line>
    </lines>
  </order>
  <order>
    <id>1002</id>
    <customer><name>Linus</name><country>FI</country></customer>
    <lines>
      <line><sku>C-3</sku><qty>5</qty></line>
    </lines>
  </order>
</orders>
"""


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - xmlx")
    print("=" * 45)

    # Step 1: Parse
    print("\n📄 Step 1: Parsing a Document")
    print("-" * 30)

    root = parse(ORDERS)
    print(f"✅ Root element: <{root.name}> with {len(root.nodes)} children")
    print(f"🏷️  Attributes: {root.attrs}")

    # Step 2: Paths
    print("\n🧭 Step 2: Path Navigation")
    print("-" * 30)

    print(f"First order id: {root.get_sub_node_string('order', 'id')}")
    print(f"First customer: {root.get_sub_node_string_x('order/customer/name')}")
    print(f"Missing path:   {root.get_sub_node_data_x('order/invoice')!r}")

    # Step 3: Predicates
    print("\n🔍 Step 3: Predicate Search")
    print("-" * 30)

    order = root.get_sub_node_by_x("", "order", "customer/country", "FI")
    print(f"Order shipped to FI: {order.get_sub_node_string('id')}")
    name = root.get_sub_node_data_by_x("", "order", "customer/name", "id", "1001")
    print(f"Customer of order 1001: {name}")

    # Step 4: Recursive search
    print("\n🌲 Step 4: Recursive Search")
    print("-" * 30)

    line = root.find_node("line")
    print(f"First line anywhere: {line.get_sub_node_string('sku')}")
    print(f"Has an <invoice>: {root.find_node_recursively('invoice').is_valid()}")

    # Step 5: Split and flatten
    print("\n✂️  Step 5: Split and Map")
    print("-" * 30)

    first = root.get_sub_node("order")
    for piece in first.split("lines"):
        print(f"  order {piece.get_sub_node_string('id')}: {piece.get_sub_node_string_x('lines/sku')}")

    for key, value in sorted(first.map().items()):
        print(f"  {key} = {value}")

    # Step 6: Configured parser
    print("\n⚙️  Step 6: Configured Parser")
    print("-" * 30)

    parser = XMLNodeParser(XMLNodeConfig.strict())
    result = parser.parse_with_result(ORDERS)
    print(f"✅ Elements: {result.element_count}, depth: {result.metrics.max_depth}")
    print(f"📈 Truncated: {result.truncated}")
    print(f"🔗 Correlation ID: {result.correlation_id}")

    print("\n🎉 Done!")


if __name__ == "__main__":
    quick_start_example()
