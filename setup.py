#!/usr/bin/env python

# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

import os
import os.path
import setuptools
import sys


sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))
import replfmt

del sys.path[0]


with open("DESCRIPTION.md", "r") as fh:
    long_description = fh.read()


if __name__ == "__main__":
    setuptools.setup(
        name="replfmt",
        version=replfmt.__version__,
        description="Bounded pretty-printing of values and unhandled exceptions for interactive consoles",  # noqa
        long_description=long_description,
        long_description_content_type="text/markdown",
        license="MIT",
        python_requires=">=3.11",
        classifiers=[
            "Development Status :: 3 - Alpha",
            "Programming Language :: Python :: 3.12",
            "Programming Language :: Python :: 3.13",
            "Topic :: Software Development :: Interpreters",
            "Operating System :: OS Independent",
            "License :: OSI Approved :: MIT License",
        ],
        package_dir={"": "src"},
        packages=setuptools.find_namespace_packages(where="src", include=["replfmt*"]),
        extras_require={
            "test": ["pytest"],
        },
        entry_points={
            "console_scripts": ["replfmt = replfmt.__main__:main"],
        },
    )
