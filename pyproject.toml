[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lasforge"
version = "0.1.0"
description = "Range coding, LAS/LAZ variable-length records and point-cloud indexing helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["las", "laz", "lidar", "point cloud", "arithmetic coding", "octree", "vlr"]
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
    "Topic :: Scientific/Engineering :: GIS",
    "Topic :: System :: Archiving :: Compression",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lasforge"]

[tool.pytest.ini_options]
addopts = "-ra"
