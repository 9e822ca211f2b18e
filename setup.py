"""
Setup configuration for kilopy package.
"""

from setuptools import setup, find_packages

setup(
    name="kilopy",
    version="0.1.0",
    description="Small terminal text editor with incremental search and syntax highlighting",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pygments>=2.19.1",
        "toml>=0.10.2",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "kilopy=kilopy.__main__:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Text Editors",
        "Topic :: Utilities",
    ],
)
