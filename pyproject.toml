[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rpsim"
version = "0.1.0"
description = "Register-level models of RP2350 microcontroller peripherals for simulation"
requires-python = ">=3.10"
dependencies = []
keywords = ["rp2350", "emulator", "simulator", "microcontroller", "peripherals", "registers"]
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
    "Topic :: System :: Emulators",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rpsim"]

[tool.pytest.ini_options]
addopts = "-ra"
