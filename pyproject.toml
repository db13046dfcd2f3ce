[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kalmantrack"
version = "0.1.0"
description = "Linear and extended Kalman filter fusion of lidar and radar measurements for 2-D object tracking"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "pyyaml",
]
keywords = [
    "kalman filter",
    "extended kalman filter",
    "sensor fusion",
    "lidar",
    "radar",
    "tracking",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
kalmantrack = "kalmantrack.app:main"

[tool.hatch.build.targets.wheel]
packages = ["kalmantrack"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
