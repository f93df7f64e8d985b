"""
Setup script for the rps-finalizer package.

Installs the ``rps_finalizer`` package from src/ and the ``rps-finalizer``
console script.
"""

from setuptools import setup, find_packages

setup(
    name="rps-finalizer",
    version="1.0.0",
    description="Off-chain finalizer and auto-play agent for encrypted Rock-Paper-Scissors games",
    author="Course Staff",
    license="MIT",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
        "web3>=7.0.0",
        "eth-account>=0.13.0",
        "eth-keys>=0.5.0",
        "eth-utils>=4.0.0",
        "aiohttp>=3.9.0",
        "httpx>=0.27.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
        "dev": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "build",
            "wheel",
        ],
    },
    entry_points={
        "console_scripts": [
            "rps-finalizer=rps_finalizer.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
