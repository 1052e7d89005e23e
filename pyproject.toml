[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "camcalib"
version = "0.1.0"
description = "Read, write and manage camera calibration files in YAML and Videre INI formats"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["camera", "calibration", "intrinsics", "yaml", "ini", "camera-info"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
camcalib-convert = "camcalib.convert:main"

[tool.hatch.build.targets.wheel]
packages = ["camcalib"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
