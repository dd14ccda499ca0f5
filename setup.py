#!/usr/bin/env python

from setuptools import setup

setup(
    name='textrazor',
    version='2.0.0',
    description='Python SDK for the TextRazor text analysis API (https://textrazor.com).',
    long_description=open('README.rst').read(),
    author='TextRazor Ltd.',
    author_email='toby@textrazor.com',
    url='https://textrazor.com/',
    license='MIT',
    py_modules=['textrazor'],
    python_requires='>=3.8',
    extras_require={
        'test': ['pytest>=7'],
    },
    classifiers=[
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development',
        'Topic :: Text Processing :: Linguistic'
    ]
)
