from setuptools import find_packages, setup

setup(
    name="fileio-handles",
    version="0.3.0",
    description="Async File and Directory handles with an expiring read/write cache",
    author="Daniel T Sasser II",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[],
    python_requires=">=3.10",
    extras_require={
        "dev": [
            "pytest",
            "pytest-asyncio>=0.23",
            "build",
            "twine",
        ],
    },
)
