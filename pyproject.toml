[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ar5iv-util"
version = "0.1.0"
description = "Tools for keeping a local arXiv source corpus up to date: id listing, snapshot scanning and source downloads."
requires-python = ">=3.10"
keywords = ["arxiv", "corpus", "latex", "mirroring"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: System :: Archiving :: Mirroring",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
create_list_of_local_ids = "ar5iv_util.create_list_of_local_ids:main"
latest_versions_from_snapshot = "ar5iv_util.latest_versions_from_snapshot:main"
update_arxiv_sources = "ar5iv_util.update_arxiv_sources:main"

[tool.hatch.build.targets.wheel]
packages = ["ar5iv_util"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
