#!/usr/bin/env python3
import os
import re

from setuptools import setup, find_packages


def main():
    os.chdir(os.path.dirname(os.path.realpath(__file__)))

    with open('stempel/__init__.py', 'r') as file:
        version = re.search(r"^__version__\s*=\s*'(.*)'", file.read(), re.M).group(1)

    with open('README', 'rb') as f:
        long_descr = f.read().decode('utf-8')

    setup(
        name='stempel',
        version=version,
        packages=find_packages(exclude=['tests']),
        python_requires='>=3.8',
        install_requires=[
            'arrow',
            'python-dateutil',
            'appdirs',
            'toml',
            'tabulate',
            'dateparser',
        ],
        extras_require={
            'test': ['pytest'],
        },
        entry_points={
            'console_scripts': [
                'stempel = stempel.cli:main',
            ],
        },
        long_description=long_descr,
        license='MIT',
        description='Track the time you spent working with simple shell commands',
    )


if __name__ == "__main__":
    main()
