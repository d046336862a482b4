from setuptools import find_packages
from setuptools import setup

setup(
    name="evented",
    version="0.1.0",
    description="Queryable, filterable event emitter with series/parallel listener sequencing",
    author="Joel Squire",
    author_email="joel@squire.org",
    packages=find_packages(include=["evented", "evented.*"]),
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.18.0",
            "pytest-cov>=3.0.0",
            "black>=22.0.0",
            "isort>=5.10.0",
            "mypy>=0.940",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
