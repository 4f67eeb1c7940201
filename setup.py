"""
Setup script for lbmflow package.
"""

from setuptools import setup, find_packages

setup(
    name="lbmflow",
    version="0.1.0",
    description="D2Q9 Lattice Boltzmann solver for flow around a cylinder",
    author="Andrey",
    packages=find_packages(include=["lbmflow", "lbmflow.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20",
        "numba>=0.56",
        "matplotlib>=3.5",
    ],
    extras_require={
        "dev": ["pytest>=7.0", "black", "flake8"],
        "test": ["pytest>=7.0"],
    },
)
