"""
This module configures the package for distribution and installation.
"""

from setuptools import setup, find_packages

setup(
    name="arose",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=["pygame", "pillow", "numpy"],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "arose = arose.__main__:main",
            "arose-viewer = arose.viewer:main",
        ]
    },
)
