from setuptools import find_packages, setup

setup(
    name="dirusage-cache",
    version="0.1.0",
    description="Recursive directory size with mtime-validated caching",
    author="Daniel T Sasser II",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "cachetools>=5.0.0",
        "humanize>=4.0.0",
    ],
    entry_points={
        "console_scripts": [
            "dirusage=dirusage.__main__:main",
        ],
    },
    python_requires=">=3.10",
    extras_require={
        "dev": [
            "pytest",
            "build",
            "twine",
        ],
    },
)
