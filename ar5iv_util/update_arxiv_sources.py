"""Download fresh e-print sources for a list of article ids into the corpus."""

from __future__ import annotations

import argparse
import re
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from itertools import islice
from pathlib import Path

import requests

from ar5iv_util.local import CORPUS_ROOT_PATH, IDS_TO_UPDATE_FILEPATH, repackage_arxiv_download

NUM_THREADS = 4
RESUME_LOG_FILEPATH = "already_updated.log"
EPRINT_URL = "https://export.arxiv.org/e-print/"
USER_AGENT = "ar5iv (https://ar5iv.labs.arxiv.org)"
_TIMEOUT = 120
_ATTEMPTS = 3
_PROGRESS_EVERY = 100

_OLD_STYLE_ID = re.compile(r"([^/]+)/([^/]+)")


def build_set(path) -> set[str]:
    """The set of lines in a file; empty when the file cannot be opened."""
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            return {line.rstrip("\n").removesuffix("\r") for line in handle}
    except OSError:
        return set()


def target_location(arxiv_id, corpus_root) -> tuple[Path, str]:
    """Directory and base file name under which an article is stored."""
    match = _OLD_STYLE_ID.fullmatch(arxiv_id)
    if match:
        archive, number = match.groups()
        base_name = f"{archive}{number}"
        yymm = number[:4]
    else:
        base_name = arxiv_id
        yymm = arxiv_id[:4]
    return Path(corpus_root) / yymm / base_name, base_name


def download_article(session, arxiv_id, corpus_root) -> bool:
    """Fetch one e-print and repackage it; True when something was stored."""
    url = f"{EPRINT_URL}{arxiv_id}"
    for _ in range(_ATTEMPTS):
        try:
            response = session.get(url, timeout=_TIMEOUT)
        except requests.RequestException:
            continue
        status = response.status_code
        if status == 200:
            if response.content:
                to_dir, base_name = target_location(arxiv_id, corpus_root)
                repackage_arxiv_download(response.content, to_dir, base_name)
                return True
            print(f"Code 200 but no bytes returned; article id {arxiv_id}.", file=sys.stderr)
        elif status == 403:
            # Almost always withheld at the author's request.
            print(f"code 403 for article id {arxiv_id}, skip.", file=sys.stderr)
            return False
        else:
            print(f"code {status} for article id {arxiv_id}.", file=sys.stderr)
    return False


def _new_session() -> requests.Session:
    session = requests.Session()
    session.headers["User-Agent"] = USER_AGENT
    return session


def update_sources(ids_to_update_path, resume_log_path, corpus_root) -> int:
    """Download every listed id not yet in the resume log; return how many were handled.

    Each handled id is appended to the resume log, whatever the outcome.
    """
    start = time.monotonic()
    already_updated = build_set(resume_log_path)
    pending = iter(sorted(build_set(ids_to_update_path) - already_updated))
    sessions = [_new_session() for _ in range(NUM_THREADS)]
    updated = 0
    with open(resume_log_path, "a", encoding="utf-8") as resume, ThreadPoolExecutor(
        max_workers=NUM_THREADS
    ) as pool:
        while batch := list(islice(pending, NUM_THREADS)):
            list(
                pool.map(
                    lambda job: download_article(job[1], job[0], corpus_root),
                    zip(batch, sessions),
                )
            )
            updated += len(batch)
            if updated % _PROGRESS_EVERY == 0:
                elapsed = int(time.monotonic() - start)
                print(f"-- updated {updated} articles in {elapsed} sec...", file=sys.stderr)
                print(f"-- last batch: {batch}", file=sys.stderr)
            for arxiv_id in batch:
                resume.write(f"{arxiv_id}\n")
            resume.flush()
    return updated


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="update_arxiv_sources",
        description="Download updated arXiv sources into the local corpus.",
    )
    parser.add_argument("ids_to_update", nargs="?", default=IDS_TO_UPDATE_FILEPATH)
    parser.add_argument("--resume-log", default=RESUME_LOG_FILEPATH)
    parser.add_argument("--corpus-root", default=CORPUS_ROOT_PATH)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Run the update over the listed ids, resuming where a previous run stopped."""
    args = _parse_args(argv)
    start = time.monotonic()
    updated = update_sources(args.ids_to_update, args.resume_log, args.corpus_root)
    elapsed = int(time.monotonic() - start)
    print(f"-- Done: updated {updated} articles in {elapsed} sec.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())