# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This module contains all errors and warnings of the package.
"""

__name__ = "siteseq"
__author__ = "The siteseq developers"
__all__ = [
    "AlphabetError",
    "InvalidSymbolError",
    "AlphabetMismatchError",
    "ConfigurationError",
    "IndexOutOfRangeError",
    "DimensionMismatchError",
    "StaleCompressionWarning",
]


class AlphabetError(Exception):
    """
    This exception is raised, when a code or a symbol is not in an
    :class:`Alphabet`.
    """

    pass


class InvalidSymbolError(AlphabetError):
    """
    Indicates that a symbol label is malformed, e.g. an allelic state
    label with wrong width or with its states in non-canonical order.
    """

    pass


class AlphabetMismatchError(AlphabetError):
    """
    Indicates that a site uses another alphabet than the container it is
    added to.
    """

    pass


class ConfigurationError(ValueError):
    """
    Indicates invalid constructor arguments.
    """

    pass


class IndexOutOfRangeError(IndexError):
    """
    Indicates a symbol code, site index or sequence index outside the
    valid range.
    """

    pass


class DimensionMismatchError(ValueError):
    """
    Indicates that the number of sequences of a site or the length of a
    vector does not fit the expected size.
    """

    pass


class StaleCompressionWarning(Warning):
    """
    Indicates that distinct stored sites of a
    :class:`CompressedSiteContainer` became identical and are kept as
    separate instances.
    """

    pass
