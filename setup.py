#!/usr/bin/env python
"""
Setup file for the AxiPot module.
"""
from setuptools import find_packages, setup

# Read the readme from /AxiPot/README.rst. As long as we are in the
# project directory, this should be accessible directly in path.
with open("README.rst", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="axipot",
    version="0.0.1",
    description="Analytic axisymmetric potentials and their derivatives for stellar dynamics.",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "sympy",
        "h5py",
        "ruamel.yaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Intended Audience :: Science/Research",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Astronomy",
    ],
    package_data={"axipot.utilities": ["bin/config.yaml"]},
    include_package_data=True,
    python_requires=">=3.8",
)
