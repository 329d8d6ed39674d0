[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mtvboard"
version = "0.1.0"
description = "Support services for a multiviewer board: MPEG-TS buffering, HLS segmenting, GPIO, diagnostics, network configuration and cascade links"
requires-python = ">=3.10"
dependencies = []
keywords = ["mpeg-ts", "hls", "gpio", "i2c", "hdmi", "multiviewer", "embedded"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: System :: Hardware",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mtvboard"]

[tool.pytest.ini_options]
addopts = "-ra"
