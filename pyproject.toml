[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "runepod"
version = "0.1.0"
description = "Ballistics, CRC-8 serial packet framing, camera sources and worker-thread managers for a vision-guided turret"
requires-python = ">=3.10"
keywords = ["ballistics", "serial", "crc8", "camera", "robotics", "turret"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]
dependencies = [
    "imageio",
    "numpy",
    "pillow",
    "pyserial",
    "pyyaml",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["runepod"]

[tool.pytest.ini_options]
addopts = "-ra"
