[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clipfeed"
version = "0.1.0"
description = "Business rules for a short-video service: follows, role-based permissions and video publishing."
requires-python = ">=3.10"
dependencies = []
keywords = ["video", "feed", "rbac", "permissions", "social", "followers"]
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
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["clipfeed"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
