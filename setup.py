from setuptools import setup, find_packages

setup(
    name="manas360",
    version="0.1.0",
    description="Session lifecycle and live countdown engine for the MANAS360 telehealth portal",
    author="",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "manas360.catalog": ["*.yaml"],
    },
    install_requires=[
        "rich>=12.5.0",
        "pydantic>=2.0.0",
        "pyyaml>=6.0.0",
        "pypubsub>=4.0.3",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "manas360=manas360.main:main",
        ],
    },
)
