[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "predmarket"
version = "0.1.0"
description = "Prediction-market order books with liquidity-weighted pricing and a WebSocket price fan-out server"
requires-python = ">=3.10"
keywords = ["prediction market", "order book", "matching engine", "lmsr", "websocket"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Office/Business :: Financial :: Investment",
]
dependencies = [
    "cryptography",
    "python-dotenv",
    "sortedcontainers",
    "websockets",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
predmarket-ws = "predmarket.server:main"

[tool.hatch.build.targets.wheel]
packages = ["predmarket"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
