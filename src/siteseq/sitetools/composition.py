# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "siteseq.sitetools"
__author__ = "The siteseq developers"
__all__ = [
    "get_symbol_frequency",
    "variability_shannon",
    "variability_factorial",
    "gc_content",
]

from math import lgamma
import numpy as np
from ..alphabet import GAP_CODE, DNA_ALPHABET, RNA_ALPHABET
from ..error import AlphabetMismatchError
from .checks import _check_site


def get_symbol_frequency(site):
    """
    Count the occurrences of each symbol in a site.

    Parameters
    ----------
    site : Site
        The site.

    Returns
    -------
    frequency : dict of (object -> int)
        Maps each occurring symbol to its number of occurrences.
        Gaps are counted under the gap symbol.
        The symbols are ordered by their symbol code.

    Examples
    --------

    >>> print(get_symbol_frequency(Site(DNA_ALPHABET, "AAC-")))
    {'-': 1, 'A': 2, 'C': 1}
    """
    _check_site(site)
    _, first_indices, counts = np.unique(
        site.code, return_index=True, return_counts=True
    )
    return {
        site[i.item()]: count.item() for i, count in zip(first_indices, counts)
    }


def variability_shannon(site):
    r"""
    Compute the Shannon entropy of the symbols in a site:

    .. math::

        H = -\sum_i f_i \ln f_i,

    where :math:`f_i` is the relative frequency of the symbol *i*.
    Gaps are treated as separate symbol.

    Parameters
    ----------
    site : Site
        The site.

    Returns
    -------
    entropy : float
        The entropy in nats.
    """
    counts = _counts(site)
    frequencies = counts / np.sum(counts)
    return float(-np.sum(frequencies * np.log(frequencies)))


def variability_factorial(site):
    r"""
    Compute the logarithm of the number of distinct arrangements of the
    symbols in a site:

    .. math::

        V = \ln \frac{n!}{\prod_i n_i!},

    where :math:`n_i` is the number of occurrences of the symbol *i*
    and :math:`n` is the number of sequences.
    Gaps are treated as separate symbol.

    Parameters
    ----------
    site : Site
        The site.

    Returns
    -------
    variability : float
        The variability, 0 for a constant site.
    """
    counts = _counts(site)
    return lgamma(np.sum(counts) + 1) - sum(lgamma(count + 1) for count in counts)


def gc_content(site):
    """
    Compute the fraction of *G* and *C* among the nucleotides of a
    nucleotide site.

    Gaps are not considered.

    Parameters
    ----------
    site : Site
        The site, with :data:`DNA_ALPHABET` or :data:`RNA_ALPHABET` as
        alphabet.

    Returns
    -------
    content : float
        The GC content.

    Raises
    ------
    ValueError
        If the site contains no nucleotides.

    Examples
    --------

    >>> print(gc_content(Site(DNA_ALPHABET, "AGC-")))
    0.6666666666666666
    """
    alphabet = _check_site(site).get_alphabet()
    if alphabet != DNA_ALPHABET and alphabet != RNA_ALPHABET:
        raise AlphabetMismatchError("GC content requires a nucleotide alphabet")
    code = site.code[site.code != GAP_CODE]
    if len(code) == 0:
        raise ValueError("Cannot compute the GC content of a site without nucleotides")
    gc_codes = [alphabet.encode("G"), alphabet.encode("C")]
    return np.count_nonzero(np.isin(code, gc_codes)).item() / len(code)


def _counts(site):
    code = _check_site(site).code
    if len(code) == 0:
        raise ValueError("The site is empty")
    return np.unique(code, return_counts=True)[1]
