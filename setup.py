# !/usr/bin/env python

from setuptools import setup, find_packages

with open("README.md") as f:
    long_description = f.read()

setup(
    name="coalescer",
    packages=find_packages(".", exclude=["tests", "tests.*"]),
    version="0.1.0",
    description="Run a function at most once at a time, coalescing calls made while it runs",
    install_requires=[
        "coloredlogs",
        "pygments",
    ],
    extras_require={"test": ["pytest"]},
    long_description=long_description,
    long_description_content_type="text/markdown",
)
