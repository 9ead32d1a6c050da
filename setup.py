#! /usr/bin/env python
# -*- coding: utf-8 -*-

from setuptools import setup, find_packages

ver_dic = {}
version_file_name = "symarray/version.py"
with open(version_file_name) as version_file:
    version_file_contents = version_file.read()

exec(compile(version_file_contents, version_file_name, "exec"), ver_dic)

setup(
    name="symarray",
    version=ver_dic["VERSION_TEXT"],
    description="Lazy symbolic arrays with column-major extract, replace "
                "and combination operations",
    long_description=open("README.rst", "r").read(),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Topic :: Scientific/Engineering",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: Software Development :: Libraries",
    ],
    python_requires="~=3.10",
    install_requires=[
        "numpy",
        "pytools>=2024.1",
        "immutabledict",
        "typing_extensions>=4.4",
        ],
    extras_require={
        "test": ["pytest"],
        },
    license="MIT",
    packages=find_packages(exclude=["test", "examples"]),
)
