from setuptools import find_packages, setup

with open("README.rst") as f:
    long_description = f.read()

setup(
    name="siftools",
    version="0.1.0",
    description="Sample grids at IPF points, compute residuals and join time series",
    long_description=long_description,
    license="MIT",
    packages=find_packages(include=["siftools", "siftools.*"]),
    package_dir={"siftools": "siftools"},
    test_suite="siftools.tests",
    python_requires=">=3.10",
    install_requires=[
        "loguru",
        "numba",
        "numpy",
        "pandas",
        "python-dateutil",
        "xarray>=0.11",
    ],
    extras_require={
        "dev": [
            "black",
            "pytest",
            "pytest-cov",
        ],
    },
    entry_points={"console_scripts": ["siftools = siftools.cli:main"]},
    classifiers=[
        # https://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Hydrology",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
    keywords="imod ipf idf groundwater residuals timeseries",
)
