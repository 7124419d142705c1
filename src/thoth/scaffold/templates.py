"""Text of the files written into a freshly scaffolded analytics project."""

from __future__ import annotations

import sys

PROJECT_DIRECTORIES = (
    "data/raw",
    "data/processed",
    "analysis",
    "reports",
    "docker",
)

KEEP_FILES = ("data/raw/.gitkeep", "data/processed/.gitkeep")

_GITIGNORE_HEAD = [
    "__pycache__/",
    "*.py[cod]",
    ".ipynb_checkpoints/",
    "# Data directories",
    "/data/raw/*",
    "/data/processed/*",
    "!/data/raw/.gitkeep",
    "!/data/processed/.gitkeep",
]

_GITIGNORE_DVC = [
    "# Keep DVC sidecars and configuration under git",
    "!/data/raw/**/*.dvc",
    "!/data/processed/**/*.dvc",
    "!*.dvc",
    "!.dvc/config",
]

_GITIGNORE_TAIL = [
    "# Environment",
    ".env",
    ".venv/",
    "reports/*_files/",
    "reports/.quarto/",
]

DVCIGNORE = (
    "# Add patterns of files dvc should ignore, which are specific to your project\n"
    "# For example: *.png, *.log\n"
)

DOCKER_COMPOSE = """\
services:
  analysis:
    build:
      context: ..
      dockerfile: docker/Dockerfile
    volumes:
      - ..:/project
    working_dir: /project
"""

REQUIREMENTS = """\
dvc
pandas
pyyaml
"""

QUARTO_REPORT = """\
---
title: "Analysis Report"
author: "Your Name"
date: today
format:
  html:
    theme: cosmo
    toc: true
    code-fold: true
jupyter: python3
---

```{python}
#| label: setup
#| include: false
import pandas as pd
```

## Overview

## Data Import and Processing

## Analysis

## Results

## Conclusions
"""


def gitignore(use_dvc: bool) -> str:
    lines = [*_GITIGNORE_HEAD, *(_GITIGNORE_DVC if use_dvc else []), *_GITIGNORE_TAIL]
    return "\n".join(lines) + "\n"


def python_version() -> str:
    return f"{sys.version_info.major}.{sys.version_info.minor}"


def dockerfile(version: str | None = None) -> str:
    """Image definition pinned to the running interpreter's minor version."""
    version = version or python_version()
    return f"""\
FROM python:{version}-slim

# Install system dependencies
RUN apt-get update && apt-get install -y --no-install-recommends \\
    git \\
    && rm -rf /var/lib/apt/lists/*

WORKDIR /project

COPY requirements.txt /project/requirements.txt
RUN pip install --no-cache-dir dvc -r /project/requirements.txt

COPY . /project/

CMD ["bash"]
"""


def readme(project_name: str) -> str:
    return f"""\
# {project_name}

## Project Overview

Describe your project here.

## Project Structure

```
+-- data/           # Data files
|   +-- raw/        # Raw data, tracked by DVC
|   +-- processed/  # Processed data, tracked by DVC
+-- analysis/       # Analysis scripts
+-- reports/        # Analysis reports (Quarto)
+-- docker/         # Docker configuration
```

## Setup

1. Clone this repository
2. Create the environment: `python -m venv .venv && .venv/bin/pip install -r requirements.txt`
3. Pull data: `dvc pull`

## Usage

Describe how to use the project here.
"""


__all__ = [
    "DOCKER_COMPOSE",
    "DVCIGNORE",
    "KEEP_FILES",
    "PROJECT_DIRECTORIES",
    "QUARTO_REPORT",
    "REQUIREMENTS",
    "dockerfile",
    "gitignore",
    "python_version",
    "readme",
]
