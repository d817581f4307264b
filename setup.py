#!/usr/bin/env python

from setuptools import setup

def readme():
    with open('README.md') as f:
        return f.read()

setup(
    name='punchcard',
    version='0.1',
    description='Encode and decode punched cards, and read them from photographs',
    long_description=readme(),
    long_description_content_type='text/markdown',
    classifiers=[],
    keywords='punched-cards hollerith ebcdic preservation',
    license='BSD',
    packages=['punchcard'],
    python_requires='>=3.8',
    install_requires=[
        'imageio>=2.28',
        'numpy',
        'scipy>=1.6',
    ],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=False
)
