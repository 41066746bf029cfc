[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "packsizer"
version = "0.1.0"
description = "HTTP API that stores pack sizes and works out the fewest packs to ship an order"
requires-python = ">=3.10"
keywords = ["packaging", "packs", "orders", "rest", "api", "flask", "mongodb"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask>=2.2",
    "pymongo>=4.0",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
packsizer = "packsizer.server:main"

[tool.hatch.build.targets.wheel]
packages = ["packsizer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
