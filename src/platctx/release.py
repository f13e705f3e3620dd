# Copyright (c) 2024 Platctx Contributors
# MIT License

"""Platctx release metadata."""

from __future__ import annotations

__version__ = "0.3.0"
__author__ = "Platctx Contributors"
__codename__ = "Compass"

