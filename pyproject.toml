[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tinycache"
version = "0.1.0"
description = "A fixed-size in-memory cache with TinyLFU admission and sampled LFU eviction, plus bloom filter, count-min sketch and buffer pool helpers."
requires-python = ">=3.10"
dependencies = []
keywords = ["cache", "tinylfu", "lfu", "bloom-filter", "count-min-sketch", "buffer-pool"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tinycache"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
