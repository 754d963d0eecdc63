"""
Setup script for korkort-progress.

Korkort is the lesson-progress core of a driving-theory learning app.
It keeps completed lessons and the study streak in local storage and
syncs them with the remote progress service when online:

1. Progress Store - merge local and remote completion state
2. Streaks - consecutive-day study tracking
3. Reminders - daily and streak study notifications

The 'korkort' command is the terminal entry point.
"""

from setuptools import find_packages, setup

setup(
    name="korkort-progress",
    version="1.0.0",
    description="Lesson progress sync for the korkort driving-theory app",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Korkort",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP
        "httpx>=0.25.0",
        # Logging
        "loguru>=0.7.0",
        # IANA zones for zoneinfo where the OS has none
        "tzdata>=2023.3",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "korkort=korkort.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="learning progress streak driving-theory education",
)
