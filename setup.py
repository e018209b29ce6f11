# -*- coding: utf-8 -*-
import codecs
from setuptools import setup, find_packages


tests_require = [
    'Flask>=2.2',
    'pytest>=6.0',
]

setup(
    name='Potion-Client',
    version='0.1.0',
    packages=find_packages(exclude=['*tests*']),
    url='http://potion.readthedocs.org/en/latest/',
    license='MIT',
    author='Lars Schöning',
    author_email='lars@lyschoening.de',
    description='Client for REST APIs that maps remote resources onto Python classes',
    long_description=codecs.open('README.rst', encoding='utf-8').read(),
    tests_require=tests_require,
    install_requires=[
        'requests>=2.20',
        'Werkzeug>=2.0',
        'jsonschema>=3.2.0',
        'aniso8601>=0.84',
        'blinker>=1.3',
        'rfc3987',
        'rfc3339-validator'
    ],
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP',
        'Topic :: Software Development :: Libraries :: Python Modules'
    ],
    zip_safe=False,
    extras_require={
        'docs': ['sphinx'],
        'tests': tests_require,
    }
)
