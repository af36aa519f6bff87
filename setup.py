"""Setup configuration for the irregular-puzzle package."""

from setuptools import find_packages, setup

setup(
    name="irregular-puzzle",
    version="0.1.0",
    packages=find_packages(include=["irregular_puzzle", "irregular_puzzle.*"]),
    python_requires=">=3.9",
    install_requires=[
        "fastapi",
        "uvicorn",
        "python-multipart",
        "pillow",
        "numpy",
        "pydantic",
        "pydantic-settings",
        "requests",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "httpx",
            "black",
            "flake8",
            "mypy",
            "isort",
        ],
    },
)
