from setuptools import setup, find_packages

setup(
    name="rcc",
    version="0.1.0",
    description="rcc — a minimal C-subset compiler emitting assembly text",
    packages=find_packages(include=["rcc", "rcc.*"]),
    python_requires=">=3.10",
    install_requires=[
        "llvmlite>=0.41.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "rcc=rcc.cli:main",
        ],
    },
)
