[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cloudpatterns"
version = "0.1.0"
description = "Stability and scalability patterns for cloud services, with a small transactional key-value server."
requires-python = ">=3.11"
dependencies = []
keywords = [
    "circuit-breaker",
    "debounce",
    "retry",
    "throttle",
    "timeout",
    "future",
    "sharding",
    "key-value",
    "transaction-log",
    "logging",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
cloudpatterns-server = "cloudpatterns.server:main"
cng = "cloudpatterns.cli:main"
cloudpatterns-logdemo = "cloudpatterns.logdemo:main"

[tool.hatch.build.targets.wheel]
packages = ["cloudpatterns"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
