#!/usr/bin/env python

from setuptools import setup

setup(
    name="rnpods",
    packages=[
        "rnpods",
        "rnpods.details",
        "rnpods.details.tools",
        "rnpods.xcode",
    ],
    python_requires=">=3.9",
    entry_points={"console_scripts": ["rnpods = rnpods.__main__:main"]},
)
