[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spacewallet"
version = "0.0.7"
description = "Wallet bookkeeping for Spaces on Bitcoin: space addresses, transaction events, dust markers and request planning"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "bitcoin",
    "spaces",
    "wallet",
    "taproot",
    "bech32",
    "auction",
    "sqlite",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["spacewallet"]

[tool.hatch.build.targets.sdist]
include = ["spacewallet", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
