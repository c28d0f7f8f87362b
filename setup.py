"""
Setup script for backwards compatibility.

Project metadata, dependencies and the bridge-matchpoints console
script are declared in pyproject.toml.
"""

from setuptools import setup

setup()
