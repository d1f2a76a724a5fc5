[build-system]
requires = ["setuptools>=69", "wheel"]
build-backend = "setuptools.build_meta"

[project]
name = "centrallog"
version = "0.1.1"
description = "Central data-logger toolkit: Modbus register map decoding, poll planning and SQLite persistence for sensor catalogs, readings, events and settings."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "modbus",
    "data-logger",
    "telemetry",
    "sensors",
    "sqlite",
    "scada",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Manufacturing",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["centrallog*"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
