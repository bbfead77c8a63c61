"""
examples/normalize_purls.py

A script that decodes package URLs and prints their canonical form, or their
components as JSON.

Purls are read from the command line, or one per line from a file.

Usage:
python examples/normalize_purls.py "pkg:pypi/Django_Rest@3.0" "pkg:npm/%40angular/core"
python examples/normalize_purls.py --file purls.txt --json
"""
import argparse
import json
import logging
import sys

from pkgurl import InvalidPackageURL, decode

# Configure basic logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Normalize package URLs (purls).")
    parser.add_argument("purls", nargs="*", help="Package URLs to normalize.")
    parser.add_argument("--file", help="Read package URLs from this file, one per line.")
    parser.add_argument("--json", action="store_true", help="Print the decoded components as JSON.")
    args = parser.parse_args()

    purls = list(args.purls)
    if args.file:
        with open(args.file, encoding="utf-8") as f:
            purls.extend(line.strip() for line in f if line.strip())

    if not purls:
        parser.error("no package URLs given")

    failures = 0
    for raw in purls:
        try:
            purl = decode(raw)
        except InvalidPackageURL as e:
            logger.error(f"Invalid purl '{raw}': {e.reason}")
            failures += 1
            continue

        if args.json:
            print(json.dumps(purl.to_dict()))
        else:
            print(purl.to_string())

    if failures:
        logger.warning(f"{failures} of {len(purls)} package URLs were invalid.")
        sys.exit(1)


if __name__ == "__main__":
    main()
