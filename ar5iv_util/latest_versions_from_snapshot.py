"""Collect articles from the arXiv metadata snapshot that gained versions lately."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Iterator, TextIO

# Date of the last full update.
LAST_UPDATE = datetime(2025, 6, 6, tzinfo=timezone.utc)
SNAPSHOT_FILEPATH = "arxiv-metadata-oai-snapshot.json"
OUTPUT_FILEPATH = "multi_version_ids.txt"

_CHUNK_SIZE = 1 << 16
_JSON_WHITESPACE = " \t\n\r"


def iter_json_values(stream: TextIO) -> Iterator[Any]:
    """Yield each JSON value of a text stream of concatenated values."""
    decoder = json.JSONDecoder()
    buffer = ""
    eof = False
    while True:
        buffer = buffer.lstrip(_JSON_WHITESPACE)
        if buffer:
            try:
                value, end = decoder.raw_decode(buffer)
            except json.JSONDecodeError:
                if eof:
                    raise
            else:
                # A value reaching the end of the buffer may continue in the next chunk.
                if end < len(buffer) or eof:
                    yield value
                    buffer = buffer[end:]
                    continue
        elif eof:
            return
        chunk = stream.read(_CHUNK_SIZE)
        if chunk:
            buffer += chunk
        else:
            eof = True


def _parse_created(text: str) -> datetime:
    try:
        created = parsedate_to_datetime(text)
    except (TypeError, ValueError) as err:
        raise ValueError(f"invalid RFC 2822 date: {text!r}") from err
    if created is None:
        raise ValueError(f"invalid RFC 2822 date: {text!r}")
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created


def has_version_since(record, since=LAST_UPDATE) -> bool:
    """True for a multi-version record with a version created after since."""
    versions = record["versions"]
    if len(versions) < 2:
        return False
    return any(since < _parse_created(version["created"]) for version in versions)


def gather_multi_version_ids(snapshot_path, output_path, since=LAST_UPDATE) -> int:
    """Write the id of every qualifying record, one per line; return how many."""
    gathered = 0
    with open(snapshot_path, encoding="utf-8") as snapshot, open(
        output_path, "w", encoding="utf-8"
    ) as output:
        for record in iter_json_values(snapshot):
            if has_version_since(record, since):
                output.write(f"{record['id']}\n")
                gathered += 1
    return gathered


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="latest_versions_from_snapshot",
        description="List ids of articles with new versions since the last update.",
    )
    parser.add_argument("snapshot", nargs="?", default=SNAPSHOT_FILEPATH)
    parser.add_argument("output", nargs="?", default=OUTPUT_FILEPATH)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Scan the snapshot and write the ids that need a fresh download."""
    args = _parse_args(argv)
    total = gather_multi_version_ids(args.snapshot, args.output)
    print(f"-- gathered {total} aritcle ids with version 2 or up.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())