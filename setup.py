from setuptools import setup, find_packages

# Read the contents of README.md for the long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

requirements = [
    "click>=8.1",
    "rich>=13.0",
    "PyYAML>=6.0",
]

setup(
    name="pdv",
    version="0.1.0",
    description="PDV (Parameter Default Values): persistent default arguments for CLI commands",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["pdv", "pdv.*"]),
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=8.0"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "pdv=pdv.cli:cli",
        ],
    },
    keywords=[
        "CLI",
        "default parameters",
        "click",
        "configuration",
    ],
    license="MIT",
)
