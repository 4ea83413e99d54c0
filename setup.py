# setup.py
from setuptools import setup, find_packages

setup(
    name="cayo",
    version="0.1.0",
    description="A small stack-based bytecode virtual machine",
    packages=find_packages(include=["cayo", "cayo.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["cayo=cayo.cli:main"],
    },
    zip_safe=False,
)
