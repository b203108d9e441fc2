#!/usr/bin/env python3

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="photo-time-rename",
    version="1.0.0",
    author="Vibe Tools",
    author_email="tools@vibe.dev",
    description="A tool to rename photos after their EXIF capture time with collision-safe suffixes",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/vibe-tools/photo-time-rename",
    packages=find_packages(),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Graphics",
        "Topic :: System :: Filesystems",
        "Topic :: Utilities",
    ],
    python_requires=">=3.8",
    install_requires=[
        "Pillow>=9.0.0",
        "exifread>=3.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "photo_time_rename=photo_time_rename.cli:main",
        ],
    },
    keywords="photo, rename, exif, timestamp, metadata",
    project_urls={
        "Bug Reports": "https://github.com/vibe-tools/photo-time-rename/issues",
        "Source": "https://github.com/vibe-tools/photo-time-rename",
    },
)
