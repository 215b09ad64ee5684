"""
Setup script for wml-adaptive.

WML Adaptive is the performance and difficulty engine behind WML
(WeMakeLessons) courses. It serves three roles:

1. Engine - Pure per-quiz update of a learner's performance record
2. Workflow - Read-modify-write of stored records around the engine
3. Generation inputs - Adaptive course prompts and topic recommendations

The 'wml' command drives the workflow from the terminal.
"""

from setuptools import find_packages, setup

setup(
    name="wml-adaptive",
    version="1.0.0",
    description="Adaptive performance and difficulty engine for WML courses",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="WML",
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
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "wml=wml.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning adaptive difficulty education quiz",
)
