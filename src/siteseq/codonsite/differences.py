# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "siteseq.codonsite"
__author__ = "The siteseq developers"
__all__ = [
    "number_of_differences",
    "number_of_synonymous_differences",
    "number_of_synonymous_positions",
    "mean_number_of_synonymous_positions",
    "pi_synonymous",
    "pi_non_synonymous",
]

import itertools
import numpy as np
from ..alphabet import GAP_CODE
from ..codon import CODON_ALPHABET, CodonTable
from ..error import AlphabetMismatchError
from ..site import Site


# Purines and pyrimidines in 'DNA_ALPHABET' code
_PURINES = frozenset([0, 2])
_PYRIMIDINES = frozenset([1, 3])


def number_of_differences(codon1, codon2):
    """
    Count the nucleotide positions at which two codons differ.

    Parameters
    ----------
    codon1, codon2 : int
        The codons as symbol codes in the :data:`CODON_ALPHABET`.

    Returns
    -------
    differences : int
        The number of differences, between 0 and 3.

    Examples
    --------

    >>> print(number_of_differences(
    ...     CODON_ALPHABET.encode("ATG"), CODON_ALPHABET.encode("ACC")
    ... ))
    2
    """
    bases1 = _to_bases(codon1)
    bases2 = _to_bases(codon2)
    return sum(1 for b1, b2 in zip(bases1, bases2) if b1 != b2)


def number_of_synonymous_differences(codon1, codon2, table=None, minchange=False):
    """
    Compute the number of synonymous differences between two codons.

    If the codons differ at more than one position, all mutational
    paths from one codon to the other one, that change a single
    nucleotide per step, are considered.
    Paths that pass through a stop codon are discarded.

    Parameters
    ----------
    codon1, codon2 : int
        The codons as symbol codes in the :data:`CODON_ALPHABET`.
    table : CodonTable, optional
        The genetic code.
        By default the :func:`CodonTable.default_table()` is used.
    minchange : bool, optional
        If false, the number of synonymous differences is averaged over
        all valid paths.
        If true, the path with the fewest non-synonymous changes, i.e.
        the most synonymous changes, is used.

    Returns
    -------
    differences : float
        The number of synonymous differences.
        0, if there is no valid path.

    Examples
    --------

    >>> ctt = CODON_ALPHABET.encode("CTT")
    >>> ttg = CODON_ALPHABET.encode("TTG")
    >>> print(number_of_synonymous_differences(ctt, ttg))
    1.0
    >>> print(number_of_synonymous_differences(ctt, ttg, minchange=True))
    2.0
    """
    table = _get_table(table)
    bases1 = _to_bases(codon1)
    bases2 = _to_bases(codon2)
    positions = [i for i in range(3) if bases1[i] != bases2[i]]
    if len(positions) == 0:
        return 0.0

    path_counts = []
    for order in itertools.permutations(positions):
        bases = list(bases1)
        previous = codon1
        nb_synonymous = 0
        for step, position in enumerate(order):
            bases[position] = bases2[position]
            current = _to_codon(bases)
            # Intermediate codons must not be stop codons
            if step < len(order) - 1 and table.is_stop_code(current):
                break
            if table.are_synonymous(previous, current):
                nb_synonymous += 1
            previous = current
        else:
            path_counts.append(nb_synonymous)

    if len(path_counts) == 0:
        return 0.0
    if minchange:
        return float(max(path_counts))
    return sum(path_counts) / len(path_counts)


def number_of_synonymous_positions(codon, table=None, ratio=1.0):
    """
    Compute the number of synonymous positions of a codon.

    Each single nucleotide substitution of the codon, that does not
    result in a stop codon and does not change the amino acid,
    contributes to the number of synonymous positions.
    Transitions (purine to purine or pyrimidine to pyrimidine) are
    weighted with ``ratio / (ratio + 2)``, transversions with
    ``1 / (ratio + 2)``.

    Parameters
    ----------
    codon : int
        The codon as symbol code in the :data:`CODON_ALPHABET`.
    table : CodonTable, optional
        The genetic code.
        By default the :func:`CodonTable.default_table()` is used.
    ratio : float, optional
        The transition/transversion ratio.
        By default transitions and transversions are equally likely.

    Returns
    -------
    positions : float
        The number of synonymous positions, between 0 and 3.
        0 for stop codons.

    Examples
    --------

    >>> print(number_of_synonymous_positions(CODON_ALPHABET.encode("CTG")))
    1.3333333333333333
    """
    table = _get_table(table)
    if table.is_stop_code(codon):
        return 0.0
    bases = _to_bases(codon)
    nb_positions = 0.0
    for position in range(3):
        for base in range(4):
            if base == bases[position]:
                continue
            mutant_bases = list(bases)
            mutant_bases[position] = base
            mutant = _to_codon(mutant_bases)
            if table.is_stop_code(mutant) or not table.are_synonymous(codon, mutant):
                continue
            if _is_transition(bases[position], base):
                nb_positions += ratio / (ratio + 2)
            else:
                nb_positions += 1 / (ratio + 2)
    return nb_positions


def mean_number_of_synonymous_positions(site, table=None, ratio=1.0):
    """
    Compute the mean number of synonymous positions of the codons in a
    codon site.

    Parameters
    ----------
    site : Site
        The site over the :data:`CODON_ALPHABET`.
        The site must not be empty and must not contain gaps.
    table : CodonTable, optional
        The genetic code.
        By default the :func:`CodonTable.default_table()` is used.
    ratio : float, optional
        The transition/transversion ratio.

    Returns
    -------
    positions : float
        The mean number of synonymous positions.
    """
    code = _check_codon_site(site, min_length=1)
    return sum(
        number_of_synonymous_positions(codon, table, ratio) for codon in code
    ) / len(code)


def pi_synonymous(site, table=None, minchange=False):
    r"""
    Compute the synonymous nucleotide diversity of a codon site.

    .. math::

        \pi_S = \frac{n}{n-1} \sum_{i \neq j} x_i x_j P_{ij},

    where :math:`x_i` is the relative frequency of codon *i*, *n* is the
    number of sequences and :math:`P_{ij}` is the number of synonymous
    differences between the codons *i* and *j*.

    Parameters
    ----------
    site : Site
        The site over the :data:`CODON_ALPHABET`.
        The site must contain at least two sequences and no gaps.
    table : CodonTable, optional
        The genetic code.
        By default the :func:`CodonTable.default_table()` is used.
    minchange : bool, optional
        Passed to :func:`number_of_synonymous_differences()`.

    Returns
    -------
    pi : float
        The synonymous diversity.
    """
    table = _get_table(table)
    return _pi(
        site,
        lambda c1, c2: number_of_synonymous_differences(c1, c2, table, minchange),
    )


def pi_non_synonymous(site, table=None, minchange=False):
    r"""
    Compute the non-synonymous nucleotide diversity of a codon site.

    .. math::

        \pi_N = \frac{n}{n-1} \sum_{i \neq j} x_i x_j P_{ij},

    where :math:`P_{ij}` is the number of non-synonymous differences
    between the codons *i* and *j*, i.e. the number of differences minus
    the number of synonymous differences.

    Parameters
    ----------
    site : Site
        The site over the :data:`CODON_ALPHABET`.
        The site must contain at least two sequences and no gaps.
    table : CodonTable, optional
        The genetic code.
        By default the :func:`CodonTable.default_table()` is used.
    minchange : bool, optional
        Passed to :func:`number_of_synonymous_differences()`.

    Returns
    -------
    pi : float
        The non-synonymous diversity.
    """
    table = _get_table(table)
    return _pi(
        site,
        lambda c1, c2: (
            number_of_differences(c1, c2)
            - number_of_synonymous_differences(c1, c2, table, minchange)
        ),
    )


def _pi(site, difference_function):
    code = _check_codon_site(site, min_length=2)
    codons, counts = np.unique(code, return_counts=True)
    frequencies = counts / len(code)
    pi = 0.0
    for i, j in itertools.permutations(range(len(codons)), 2):
        pi += (
            frequencies[i]
            * frequencies[j]
            * difference_function(codons[i].item(), codons[j].item())
        )
    n = len(code)
    return float(pi * n / (n - 1))


def _check_codon_site(site, min_length, allow_gaps=False):
    """
    Check that the site is a codon site with at least `min_length`
    sequences and return its code as list.
    """
    if not isinstance(site, Site):
        raise TypeError(f"Expected a 'Site', not '{type(site).__name__}'")
    if site.get_alphabet() != CODON_ALPHABET:
        raise AlphabetMismatchError("The site must be a codon site")
    if len(site) < min_length:
        raise ValueError(
            f"The site must contain at least {min_length} sequence(s), "
            f"but it contains {len(site)}"
        )
    if not allow_gaps and (site.code == GAP_CODE).any():
        raise ValueError("The site must not contain gaps")
    return [c.item() for c in site.code]


def _get_table(table):
    return CodonTable.default_table() if table is None else table


def _to_bases(codon):
    if codon < 0 or codon >= len(CODON_ALPHABET):
        raise ValueError(f"'{codon}' is not a valid codon code")
    return (codon // 16, codon // 4 % 4, codon % 4)


def _to_codon(bases):
    return bases[0] * 16 + bases[1] * 4 + bases[2]


def _is_transition(base1, base2):
    return (base1 in _PURINES and base2 in _PURINES) or (
        base1 in _PYRIMIDINES and base2 in _PYRIMIDINES
    )
