#!/usr/bin/env python3
"""
Setup script for Credential Cache
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="credential-cache",
    version="1.0.0",
    description="Cross-platform id token cache backed by OS secure storage",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: MacOS",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Database",
        "Topic :: System :: Systems Administration :: Authentication/Directory",
    ],
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0",
        "keyring>=24.0",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "rich>=13.0",
        "structlog>=23.1",
    ],
    extras_require={
        "windows": ["pywin32-ctypes>=0.2"],
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "credential-cache=credential_cache.cli.entry_points:entrypoint",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
