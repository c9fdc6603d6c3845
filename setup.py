#!/usr/bin/env python3
"""
Setup configuration for streamgrab
Turn SoundCloud and Bandcamp links into M3U playlists of stream URLs
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements (always installed)
core_requirements = [
    "requests>=2.31.0",
    "yt-dlp>=2023.12.30",
    "click>=8.1.7",
    "rich-click>=1.7.0",
    "pyyaml>=6.0.1",
    "tqdm>=4.66.1",
    "beautifulsoup4>=4.12.2",
    "lxml>=4.9.3",
]

setup(
    name="streamgrab",
    version="0.1.0",
    author="streamgrab",
    description="Generate M3U playlists from SoundCloud and Bandcamp URLs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "black>=23.11.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
            "types-requests",
            "types-PyYAML",
        ],
    },
    entry_points={
        "console_scripts": [
            "streamgrab=streamgrab.cli:main",
        ],
    },
    keywords="soundcloud bandcamp music playlist m3u stream cli",
)
