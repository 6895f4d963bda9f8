[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tcpkit"
version = "0.1.0"
description = "Wire formats, sockets, a poll-based event loop and TUN adapters for carrying a user-space TCP stack over IPv4"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "ipv4", "arp", "ethernet", "tun", "checksum", "networking", "event loop"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tcpkit"]

[tool.pytest.ini_options]
addopts = "-ra"
