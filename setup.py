from setuptools import setup, find_packages
import re

# Read version from __init__.py
with open("cds/__init__.py", encoding="utf-8") as f:
    content = f.read()
    version_match = re.search(r"__version__\s*=\s*['\"]([^'\"]+)['\"]", content)
    if not version_match:
        raise RuntimeError("Unable to find version string in cds/__init__.py")
    version = version_match.group(1)

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="cds",
    version=version,
    description="A contract deployment sequencer that deploys smart contracts in dependency order.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["cds", "cds.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
    python_requires=">=3.8",
    install_requires=[
        "click>=8.0.0",
        "python-dotenv>=1.0.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "requests>=2.31.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "cds=cds.cli.main:cli",
        ],
    },
)
