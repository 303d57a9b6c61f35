#!/usr/bin/env python3
"""
kv-collections Setup Script
===========================
Allows installation of the kv-collections package.

Usage:
    pip install -e .           # Development install
    pip install -e ".[test]"   # With test dependencies
    pip install .              # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="kv-collections",
    version="1.0.0",
    packages=find_packages(include=["kvcollections", "kvcollections.*"]),
    python_requires=">=3.10",
    install_requires=[
        "redis>=4.2",
    ],
    extras_require={
        "test": [
            "pytest>=7",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "kv-collections=kvcollections.cli:main",
        ],
    },
)
