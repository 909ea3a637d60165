"""A setuptools based setup module.

See:
https://packaging.python.org/en/latest/distributing.html
https://github.com/pypa/sampleproject
"""
import os

from setuptools import find_packages, setup

# pylint: disable=redefined-builtin

here = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(here, "README.rst"), encoding="utf-8") as fid:
    long_description = fid.read()

with open(os.path.join(here, "requirements.txt"), encoding="utf-8") as fid:
    install_requires = [line for line in fid.read().splitlines() if line.strip()]

setup(
    name="slax-strings",
    version="0.1.0",
    description=(
        "Assemble SLAX token segments into XPath, concat() and "
        "attribute-value templates."
    ),
    long_description=long_description,
    author="The slax-strings developers",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: BSD License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    license="License :: OSI Approved :: BSD License",
    keywords="slax xslt xpath attribute value template string literal",
    packages=find_packages(exclude=["tests", "tests.*", "continuous_integration"]),
    install_requires=install_requires,
    extras_require={
        "dev": [
            "black==24.8.0",
            "mypy==1.11.2",
            "pylint==3.2.7",
            "coverage>=6.5.0,<8",
        ],
    },
    py_modules=["slax_strings"],
    package_data={"slax_strings": ["py.typed"]},
    data_files=[(".", ["README.rst", "requirements.txt"])],
    entry_points={
        "console_scripts": [
            "slax-strings=slax_strings.main:entry_point",
        ]
    },
)
