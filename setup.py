"""Setup file for the vehicle damage assessment package."""

from setuptools import setup, find_packages

setup(
    name="autodamage-pro",
    version="1.0.0",
    description="AI-powered vehicle damage assessment from photos",
    author="Alan Sajith",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "fastapi>=0.100",
        "uvicorn>=0.23",
        "python-multipart>=0.0.6",
        "pydantic>=2.0",
        "httpx>=0.24",
        "Pillow>=9.0",
        "PyYAML>=6.0",
        "loguru>=0.7",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
)
