"""Assemble SLAX token segments into XPath, concat() and attribute-value templates."""

# NOTE: Keep the metadata in sync with setup.py.
__version__ = "0.1.0"
__author__ = "The slax-strings developers"
__license__ = "License :: OSI Approved :: BSD License"
__status__ = "Beta"
