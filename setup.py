# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="whimsi",
    version="0.1.0",
    description="Assemble Windows Installer directory and file layouts from a TOML config and a source tree",
    python_requires=">=3.11",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["whimsi", "whimsi.*"]),
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'whimsi=whimsi.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
