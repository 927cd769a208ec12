[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "assistkit"
version = "0.1.0"
description = "Building blocks for a retrieval-augmented chat assistant: conversation memory, task tools, prompts, Redis vector index helpers and a small web server."
requires-python = ">=3.10"
keywords = ["assistant", "llm", "agent", "tools", "memory", "tasks"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Framework :: Flask",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]
dependencies = [
    "flask",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
assistkit-server = "assistkit.server:main"

[tool.hatch.build.targets.wheel]
packages = ["assistkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
