"""
Setup script for tiny-digest.
"""

from setuptools import setup, find_packages

setup(
    name="tiny-digest",
    version="0.1.0",
    packages=find_packages(include=["tiny_digest", "tiny_digest.*"]),
    package_data={"tiny_digest": ["py.typed"]},
    python_requires=">=3.8",
)
