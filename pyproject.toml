[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "meshcast"
version = "0.1.0"
description = "Building blocks for topic-based publish/subscribe overlays: flood routing, peer backoff, blacklists, gossip promise tracking and RPC framing."
requires-python = ">=3.10"
dependencies = []
keywords = ["pubsub", "floodsub", "gossip", "p2p", "overlay", "multicast", "backoff"]
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
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["meshcast"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
