[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "miniftp"
version = "0.1.0"
description = "A minimal FTP-like server and interactive client over plain TCP"
requires-python = ">=3.10"
dependencies = []
keywords = ["ftp", "server", "client", "tcp", "file-transfer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: File Transfer Protocol (FTP)",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
miniftp-server = "miniftp.server:main"
miniftp-client = "miniftp.client:main"

[tool.hatch.build.targets.wheel]
packages = ["miniftp"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
