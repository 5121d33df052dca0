#!/usr/bin/env python3
"""
Scheduled review generator.

Fetches products from the marketplace API when MARKETPLACE_* credentials are
configured, otherwise (or when the call fails) uses the stored products, and
writes one review article per product that does not have one yet.

Usage (e.g. from cron):
    python generate_content.py [--category electronics] [--keywords "usb c hub"] [--limit 10]
"""

import argparse
import json
import sys

from reviewhub import create_app
from reviewhub.utils.content_generator import generate_content


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Generate affiliate review articles')
    parser.add_argument('--category', help='Marketplace search index / article category')
    parser.add_argument('--keywords', help='Marketplace search keywords')
    parser.add_argument('--limit', type=int, help='Number of marketplace items to request (1-10)')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    app = create_app()

    with app.app_context():
        result = generate_content(category=args.category, keywords=args.keywords, limit=args.limit)

    print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
