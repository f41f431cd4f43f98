[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "bptreedb"
version = "0.1.0"
description = "An in-memory B+ tree with a small table catalog, record store and join engine"
requires-python = ">=3.10"
dependencies = []
keywords = ["b+tree", "btree", "database", "index", "catalog", "join"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bptreedb = "bptreedb.cli:main"

[tool.setuptools]
packages = ["bptreedb"]

[tool.pytest.ini_options]
addopts = "-ra"
