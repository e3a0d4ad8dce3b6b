#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Setup script for the supply-chain ESG core

This file is kept for legacy compatibility and pip editable installs.
The main package configuration is in pyproject.toml.
"""

from setuptools import setup

# Version is also set in pyproject.toml and supplychain_esg/__init__.py
VERSION = "0.3.0"

# Main setup configuration is in pyproject.toml
setup(
    version=VERSION,
)
