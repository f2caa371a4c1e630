
import os

from setuptools import setup, find_packages

# Set up the package
setup(
    name="modwt-core",
    version="0.1.0",
    author="Scott Friedman and Project Contributors",
    author_email="",
    description="Maximal overlap discrete wavelet transform engine with periodic, zero-padding and symmetric boundaries and FFT-accelerated circular convolution",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["modwt_core", "modwt_core.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.19.0",
        "scipy>=1.5.0",
        "pywavelets>=1.1.0",
    ],
    extras_require={
        "plot": ["matplotlib"],
        "dev": ["pytest", "matplotlib"],
        "test": ["pytest", "matplotlib"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS :: MacOS X",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
