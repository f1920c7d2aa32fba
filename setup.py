# -*- coding: utf-8 -*-
"""
rdfprefix
=========

rdfprefix_ expands prefixed names such as ``schema:name`` into IRIs and
compacts IRIs back into prefixed names, using JSON-LD_ style contexts.

.. _rdfprefix: http://github.com/rdfprefix/rdfprefix
.. _JSON-LD: http://json-ld.org/
"""

from setuptools import setup
import os

# get meta data
about = {}
with open(os.path.join(
        os.path.dirname(__file__), 'lib', 'rdfprefix', '__about__.py')) as fp:
    exec(fp.read(), about)

with open(os.path.join(os.path.dirname(__file__), 'README.rst')) as fp:
    long_description = fp.read()

setup(
    name='rdfprefix',
    version=about['__version__'],
    description='Expand and compact RDF prefixed names',
    long_description=long_description,
    long_description_content_type='text/x-rst',
    author='rdfprefix contributors',
    url='http://github.com/rdfprefix/rdfprefix',
    packages=['rdfprefix', 'rdfprefix.documentloader'],
    package_dir={'': 'lib'},
    license='BSD 3-Clause license',
    python_requires='>=3.8',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Internet',
        'Topic :: Software Development :: Libraries',
    ],
    install_requires=[],
    extras_require={
        'requests': ['requests'],
        'tests': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'rdfprefix = rdfprefix.cli:main',
        ],
    },
)
