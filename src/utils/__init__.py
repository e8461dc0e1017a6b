# -*- coding: utf-8 -*-
"""Utility modules"""
from .paths import (
    ROOT_DIR, DATA_DIR, ARTIFACT_DIR,
    data_path, fig_path, report_path, ensure_dirs
)
