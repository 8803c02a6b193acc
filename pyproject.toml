[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ogbengine"
version = "0.1.0"
description = "A small 2D game engine core: PCM audio formats, WAV reading, quad drawing and a map scene."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["game", "engine", "audio", "pcm", "wav", "drawing", "2d", "quads"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Topic :: Multimedia :: Sound/Audio",
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ogbengine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
