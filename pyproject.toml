[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "coolsemant"
version = "0.1.0"
description = "Semantic analysis and type checking for Cool programs"
requires-python = ">=3.10"
dependencies = []
keywords = ["cool", "compiler", "semantic-analysis", "type-checking", "ast"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["coolsemant"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
