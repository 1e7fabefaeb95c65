[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trainer"
version = "5.5.1"
description = "Run, verify and watch a course of small compiled programming exercises"
requires-python = ">=3.11"
keywords = ["exercises", "learning", "course", "verify", "watch", "rustc"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education :: Computer Aided Instruction (CAI)",
]
dependencies = [
    "termcolor",
    "watchdog",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
trainer = "trainer.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["trainer"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
