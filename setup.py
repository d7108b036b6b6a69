"""
Setup script for libregto.

libregto is a terminal poker strategy tutor. It teaches six-max
preflop play through a staged curriculum:

1. Foundations - hand strength, position, equity and opening ranges
2. Drills - timed speed drills on the same concepts
3. Scenarios - 3-bet, defense and board texture decisions

Progress (bests, unlocks, achievements) is kept in a local JSON file.
"""

from setuptools import find_namespace_packages, setup

setup(
    name="libregto",
    version="0.1.0",
    description="Terminal poker strategy tutor with drills, scenarios and unlockable progress",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_namespace_packages(include=["src", "src.*"]),
    py_modules=["config", "main"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.12.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "libregto=src.cli.tutor_cli:run",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Games/Entertainment",
    ],
    keywords="poker gto preflop ranges tutor cli education",
)
