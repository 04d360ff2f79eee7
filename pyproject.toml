[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "emjson"
version = "0.1.0"
description = "Incremental parser for streams of JSON objects, built on a table-driven lexer and a stack of action automata"
requires-python = ">=3.10"
dependencies = []
keywords = ["json", "parser", "streaming", "lexer", "dfa"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: File Formats :: JSON",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
emjson = "emjson.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["emjson"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
