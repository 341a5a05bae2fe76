#!/usr/bin/env python

from setuptools import setup


VERSION = "0.1a1"

setup(
    name="selectree",
    version=VERSION,
    description="Chainable selections to query and manipulate HTML and XML trees.",
    license="AGPL-3.0-or-later",
    packages=[
        "_selectree",
        "_selectree.api",
        "_selectree.plugins",
        "selectree",
        "selectree.plugins",
    ],
    python_requires=">=3.10",
    install_requires=["cssselect>=1.2", "lxml"],
    extras_require={"test": ["pytest"]},
)
