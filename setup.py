from setuptools import setup, find_packages

setup(
    name="grib-inspector",
    version="0.1.0",
    packages=find_packages(exclude=["tests"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "pydantic>=2",
        "pygrib>=2.1",
        "numpy",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "grib-inspector=grib_inspector.cli:main",
        ],
    },
    python_requires=">=3.8",
)
