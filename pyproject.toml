[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hpckit"
version = "0.1.0"
description = "Small numerical kernels, thread patterns, a sparse preconditioned CG solver and an IDEA-style block cipher tool"
requires-python = ">=3.10"
keywords = [
    "hpc",
    "numerical",
    "conjugate-gradient",
    "sparse",
    "incomplete-cholesky",
    "convolution",
    "transpose",
    "threads",
    "idea-cipher",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
hpckit-crypt = "hpckit.idea:main"
hpckit-generate-data = "hpckit.datagen:main_data"
hpckit-generate-userkey = "hpckit.datagen:main_userkey"
hpckit-kernels = "hpckit.kernels:main"
hpckit-particles = "hpckit.particles:main"
hpckit-conv = "hpckit.conv:main"
hpckit-simd = "hpckit.simd:main"
hpckit-transpose = "hpckit.transpose:main"
hpckit-pi = "hpckit.pi:main"
hpckit-primes = "hpckit.primes:main"
hpckit-cg = "hpckit.cg:main"
hpckit-demos = "hpckit.demos:main"

[tool.hatch.build.targets.wheel]
packages = ["hpckit"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
