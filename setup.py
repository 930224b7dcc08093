"""
BloodChain: blood donation tracking backend

BloodChain records donors, donations and NFT donation certificates, awards
reward points and reports donation analytics through a REST API.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh.readlines() if line.strip() and not line.startswith("#")]

with open("requirements-dev.txt", "r", encoding="utf-8") as fh:
    test_requirements = [line.strip() for line in fh.readlines() if line.strip() and not line.startswith("#")]

# Get version from the package
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '.'))
from bloodchain.units.version import get_version
from bloodchain import VERSION

setup(
    name="bloodchain",
    version=get_version(VERSION),
    description="Blood donation tracking backend with donor rewards and NFT certificates",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=['bloodchain', 'bloodchain.*'], exclude=['tests*']),
    install_requires=requirements,
    extras_require={
        "test": test_requirements,
    },
    entry_points={
        "console_scripts": [
            "bloodchain=bloodchain.cli:cli",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Intended Audience :: Developers",
        "Framework :: FastAPI",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    keywords="blood donation, donors, nft, rewards, fastapi",
)
