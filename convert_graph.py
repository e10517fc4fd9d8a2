#!/usr/bin/env python3
"""Convert a graph between the edgelist and adjacencylist file formats.

Usage:
    python convert_graph.py graph.edgelist graph.adjacencylist
    python convert_graph.py --reverse graph.adjacencylist graph.edgelist
"""

import argparse
import logging
import sys

from stagkit.graph import adjacencylist_to_edgelist, edgelist_to_adjacencylist

log = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Convert an edgelist file to an adjacencylist file"
    )
    parser.add_argument("source", help="File to read")
    parser.add_argument("destination", help="File to write")
    parser.add_argument(
        "--reverse",
        action="store_true",
        help="Convert an adjacencylist to an edgelist instead",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.reverse:
            adjacencylist_to_edgelist(args.source, args.destination)
        else:
            edgelist_to_adjacencylist(args.source, args.destination)
    except Exception:
        log.exception("Conversion failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
