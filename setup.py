#!/usr/bin/env python
from setuptools import setup, find_packages

with open('README.rst') as f:
    long_description = f.read()

setup(
    name='lockstep',
    version='0.1.0',
    description='Model-based property testing of stateful systems',
    long_description=long_description,
    packages=find_packages(exclude=('tests', 'tests.*', 'examples', 'docs')),
    python_requires='>=3.10',
    install_requires=[
        'attrs',
        'graphviz',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
