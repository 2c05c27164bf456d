[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dmnd-proxy"
version = "0.1.5"
description = "Asyncio building blocks of a mining proxy: health state, pool connection setup and relays, share accounting and hashrate handling."
requires-python = ">=3.10"
dependencies = []
keywords = ["mining", "proxy", "stratum", "sv2", "hashrate", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Framework :: AsyncIO",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["dmnd_proxy"]

[tool.hatch.build.targets.sdist]
include = ["dmnd_proxy", "tests"]

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
check_untyped_defs = true
