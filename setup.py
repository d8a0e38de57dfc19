"""Packaging for noteid (src/ layout)."""

from setuptools import find_packages, setup

setup(
    name="noteid",
    version="0.1.0",
    description="Stable, time-sortable IDs in the front matter of markdown notes",
    python_requires=">=3.11",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "click>=8.1",
        "PyYAML>=6.0",
        "rich>=13.0",
    ],
    extras_require={
        "watch": ["inotify_simple>=1.3"],
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["noteid = noteid.cli:main"],
    },
)
