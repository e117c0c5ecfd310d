from setuptools import setup, find_packages

setup(
    name="pplcore",
    version="0.1.0",
    description="A minimal probabilistic programming language with rejection and importance sampling",
    author="pplcore Authors",
    packages=find_packages(exclude=["tests", "testing"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.20.0",
    ],
    extras_require={
        "dev": [
            "pytest",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
