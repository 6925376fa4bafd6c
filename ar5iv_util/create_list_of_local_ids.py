"""Command that records which article ids are present in the local corpus.

Run once at the start of a global update: only ids already available
locally are considered for updating later on.
"""

from __future__ import annotations

import argparse
import sys

from ar5iv_util.local import CORPUS_ROOT_PATH, UNCHECKED_IDS_FILEPATH, create_list_of_ids


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="create_list_of_local_ids",
        description="Walk the local corpus and list the article ids it holds.",
    )
    parser.add_argument(
        "corpus_root",
        nargs="?",
        default=CORPUS_ROOT_PATH,
        help="root directory of the local corpus",
    )
    parser.add_argument(
        "output",
        nargs="?",
        default=UNCHECKED_IDS_FILEPATH,
        help="file receiving one id per line (left alone if it exists)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Write the list of local ids; an existing list is kept as it is."""
    args = _parse_args(argv)
    print("-- gathering ids from local arXiv corpus directory", file=sys.stderr)
    create_list_of_ids(args.corpus_root, args.output)
    print("-- Done!", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())