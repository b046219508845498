"""Setup script for hadron_cascade package."""

from setuptools import setup, find_packages

setup(
    name='hadron_cascade',
    version='1.0.0',
    packages=find_packages(include=['hadron_cascade', 'hadron_cascade.*']),
    package_data={
        'hadron_cascade.config': ['defaults.yaml'],
        'hadron_cascade': ['data/*.yaml'],
    },
    python_requires='>=3.9',
    install_requires=[
        'numpy>=1.20.0',
        'scipy>=1.9.0',
        'matplotlib>=3.3.0',
        'PyYAML>=5.4',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
)
