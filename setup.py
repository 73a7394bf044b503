#!/usr/bin/env python3
"""
Setup script for Blogwright - blog pages for static sites.
"""

from setuptools import setup, find_packages
import os

# Read the contents of README file
this_directory = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(this_directory, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='blogwright',
    version='1.0.0',
    description='Derived blog pages (tags, archives, collections, pagination) for static sites',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'blogwright_pkg': [
            'templates/*.j2',
        ],
    },
    include_package_data=True,
    install_requires=[
        'PyYAML>=6.0',
        'Jinja2>=3.0',
        'tzdata',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
            'pytest-cov>=4.0',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Internet :: WWW/HTTP :: Site Management',
        'Topic :: Software Development :: Code Generators',
    ],
    python_requires='>=3.9',
    entry_points={
        'console_scripts': [
            'blogwright=blogwright_pkg.cli:main',
        ],
    },
    keywords='static site generator, blog, tags, archives, pagination',
)
