[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "neuralpixel"
version = "0.1.0"
description = "Build stable-diffusion command lines, keep generation settings cached and read PNG generation parameters"
requires-python = ">=3.10"
dependencies = []
keywords = ["stable-diffusion", "image-generation", "png", "prompt", "command-line"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
neuralpixel = "neuralpixel.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["neuralpixel"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
