from setuptools import setup, find_packages

setup(
    name="itunesSearch",
    version="0.1.0",
    description="Typed client for the iTunes Search and Lookup API",
    author="Your Name",
    author_email="you@example.com",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
        "requests>=2.31.0",
        "tabulate>=0.8.9",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "requests-mock>=1.11",
        ],
    },
    entry_points={
        "console_scripts": ["itunes=itunesSearch.cli.__main__:main"],
    },
    license="MIT",
)
