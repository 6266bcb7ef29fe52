# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="cvfs",
    version="1.0.0",
    description="Custom Virtual File System: in-memory file tree shell with search criteria and undo/redo",
    python_requires=">=3.8",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["cvfs*"]),
    package_data={
        "cvfs.interface": ["locales/*.json"],
    },
    include_package_data=True,
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'cvfs=cvfs.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
