# -*- coding: utf-8 -*-
"""
Path helpers for input data and generated artifacts.

Directories can be redirected with the DATA_DIR and ARTIFACT_DIR environment
variables; both are read on every call so a caller (or a test) can change them
at runtime.
"""

import os
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[2]
DATA_DIR = ROOT_DIR / 'data'
ARTIFACT_DIR = ROOT_DIR / 'artifact'


def _data_root() -> Path:
    return Path(os.getenv('DATA_DIR', DATA_DIR))


def _artifact_root() -> Path:
    return Path(os.getenv('ARTIFACT_DIR', ARTIFACT_DIR))


def data_path(filename: str) -> Path:
    """Path of an input file inside the data directory."""
    return _data_root() / filename


def fig_path(filename: str) -> Path:
    """Path of a figure file; the figures directory is created on demand."""
    path = _artifact_root() / 'figures' / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def report_path(filename: str) -> Path:
    """Path of a table/summary file; the reports directory is created on demand."""
    path = _artifact_root() / 'reports' / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def ensure_dirs():
    """Create the data, figure and report directories."""
    for directory in (_data_root(), _artifact_root() / 'figures', _artifact_root() / 'reports'):
        directory.mkdir(parents=True, exist_ok=True)
