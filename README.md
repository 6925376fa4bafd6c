# ar5iv-util

Command-line tools and helpers for maintaining a local mirror of arXiv
article sources, laid out as `<corpus root>/<yymm>/<id>/<id>.zip`.

## Installation

```
pip install .
```

## Commands

`create_list_of_local_ids [CORPUS_ROOT] [OUTPUT]`
: Walk the local corpus (default `/data/arxmliv`) two directory levels deep
  and write every article id found there to `OUTPUT` (default
  `unchecked_ids.txt`), one per line. Old-style directory names such as
  `math0607467` are written as `math/0607467`. Does nothing if the output
  file already exists.

`latest_versions_from_snapshot [SNAPSHOT] [OUTPUT]`
: Read the arXiv metadata snapshot (default
  `arxiv-metadata-oai-snapshot.json`, a stream of concatenated JSON records)
  and write to `OUTPUT` (default `multi_version_ids.txt`) the id of every
  article with more than one version, where some version was created after
  the last full update (2025-06-06, UTC).

`update_arxiv_sources [IDS_FILE] [--resume-log PATH] [--corpus-root DIR]`
: Download the e-print source of every id listed in `IDS_FILE` (default
  `ids_to_update.txt`) from `export.arxiv.org`, four at a time, and
  repackage it as a ZIP archive in the corpus (default `/data/arxmliv`).
  Each handled id is appended to the resume log (default
  `already_updated.log`), so an interrupted run resumes where it stopped.
  Articles answering HTTP 403 are skipped; other failures are retried up to
  three times.

## Library use

```python
from ar5iv_util.local import filter_list_to_check, repackage_arxiv_download

todo = filter_list_to_check("unchecked_ids.txt", "checked_ids.csv")

with open("2301.00001", "rb") as handle:
    zip_path = repackage_arxiv_download(handle.read(), "corpus/2301/2301.00001", "2301.00001")
```

`repackage_arxiv_download` unwraps gzip, bzip2 and xz compression, copies the
entries of a tar or zip archive into the new ZIP file, and stores anything
else as a single `<base_name>.tex` entry. It returns the path of the ZIP file.

`ar5iv_util.latest_versions_from_snapshot` also offers `iter_json_values`,
`has_version_since` and `gather_multi_version_ids`; `ar5iv_util.update_arxiv_sources`
offers `build_set`, `target_location`, `download_article` and `update_sources`.

## What this package does not do

It does not find out by itself which articles changed on arXiv: there is no
harvesting of recent changes and no daily update command. The list of ids to
download must come from the snapshot scan above or be supplied by hand. It
also does not probe arXiv for the latest version number of an article.

## Running the tests

```
pip install .[test]
pytest
```