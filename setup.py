# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="fsreconcile",
    version="1.0.0",
    description="Check and repair the expected file and directory structure of an installation",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["fsreconcile", "fsreconcile.*"]),
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'fsreconcile=fsreconcile.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX",
        "Environment :: Console",
    ],
)
