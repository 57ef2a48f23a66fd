# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "siteseq.codonsite"
__author__ = "The siteseq developers"
__all__ = [
    "has_stop",
    "is_mono_site_polymorphic",
    "is_synonymous_polymorphic",
    "is_four_fold_degenerated",
    "has_gap_or_stop",
    "remove_rare_variants",
]

import numpy as np
from ..alphabet import GAP_CODE
from ..codon import CODON_ALPHABET
from ..site import Site
from .differences import _check_codon_site, _get_table, _to_bases


def has_stop(site, table=None):
    """
    Check whether a codon site contains a stop codon.

    Gaps are ignored.

    Parameters
    ----------
    site : Site
        The site over the :data:`CODON_ALPHABET`.
    table : CodonTable, optional
        The genetic code that defines the stop codons.
        By default the :func:`CodonTable.default_table()` is used.

    Returns
    -------
    stop : bool
        True, if at least one sequence has a stop codon.
    """
    table = _get_table(table)
    _check_codon_site(site, min_length=0, allow_gaps=True)
    return any(
        table.is_stop_code(codon.item())
        for codon in site.code
        if codon != GAP_CODE
    )


def is_mono_site_polymorphic(site):
    """
    Check whether a codon site is polymorphic at exactly one of the three
    nucleotide positions.

    Parameters
    ----------
    site : Site
        The site over the :data:`CODON_ALPHABET`.
        The site must not be empty and must not contain gaps.

    Returns
    -------
    polymorphic : bool
        True, if the codons differ at exactly one position.
    """
    code = _check_codon_site(site, min_length=1)
    bases = np.array([_to_bases(codon) for codon in code])
    nb_polymorphic = np.count_nonzero((bases != bases[0]).any(axis=0))
    return nb_polymorphic == 1


def is_synonymous_polymorphic(site, table=None):
    """
    Check whether a codon site is polymorphic at exactly one nucleotide
    position and all codons code for the same amino acid.

    Parameters
    ----------
    site : Site
        The site over the :data:`CODON_ALPHABET`.
        The site must not be empty and must not contain gaps.
    table : CodonTable, optional
        The genetic code.
        By default the :func:`CodonTable.default_table()` is used.

    Returns
    -------
    synonymous : bool
        True, if the polymorphism is synonymous.
    """
    if not is_mono_site_polymorphic(site):
        return False
    table = _get_table(table)
    code = site.code.tolist()
    return all(table.are_synonymous(code[0], codon) for codon in code[1:])


def is_four_fold_degenerated(site, table=None):
    """
    Check whether all codons in a codon site are four-fold degenerated,
    i.e. any substitution at their third position is synonymous.

    Parameters
    ----------
    site : Site
        The site over the :data:`CODON_ALPHABET`.
        The site must not be empty and must not contain gaps.
    table : CodonTable, optional
        The genetic code.
        By default the :func:`CodonTable.default_table()` is used.

    Returns
    -------
    degenerated : bool
        True, if each codon is four-fold degenerated.
    """
    code = _check_codon_site(site, min_length=1)
    table = _get_table(table)
    return all(table.is_four_fold_degenerated(codon) for codon in code)


def has_gap_or_stop(site, table=None):
    """
    Check whether a codon site contains a gap or a stop codon.

    Parameters
    ----------
    site : Site
        The site over the :data:`CODON_ALPHABET`.
    table : CodonTable, optional
        The genetic code that defines the stop codons.
        By default the :func:`CodonTable.default_table()` is used.

    Returns
    -------
    gap_or_stop : bool
        True, if at least one sequence has a gap or a stop codon.
    """
    _check_codon_site(site, min_length=0, allow_gaps=True)
    return bool((site.code == GAP_CODE).any()) or has_stop(site, table)


def remove_rare_variants(site, freqmin, table=None):
    """
    Create a codon site, where rare codons are replaced by the most
    frequent codon of the site.

    Rare variants are commonly excluded from tests based on
    polymorphism and divergence, like the McDonald-Kreitman test.

    Parameters
    ----------
    site : Site
        The site over the :data:`CODON_ALPHABET`.
        The site must not be empty and must neither contain gaps nor
        stop codons.
    freqmin : float
        Codons with a relative frequency strictly lower than this value
        are replaced.
    table : CodonTable, optional
        The genetic code that defines the stop codons.
        By default the :func:`CodonTable.default_table()` is used.

    Returns
    -------
    new_site : Site
        The site without rare variants, at the same position as the
        input site.
        If multiple codons are most frequent, the one with the lowest
        symbol code is used.

    Examples
    --------

    >>> site = Site(CODON_ALPHABET, ["CTG", "CTG", "CTG", "CTA"], position=4)
    >>> print(remove_rare_variants(site, 0.3))
    CTG CTG CTG CTG
    """
    code = _check_complete_codon_site(site, table)
    codons, counts = np.unique(code, return_counts=True)
    # 'argmax()' returns the first maximum, i.e. the lowest codon
    most_frequent = codons[np.argmax(counts)]
    rare = codons[counts / len(code) < freqmin]
    new_site = Site(CODON_ALPHABET, position=site.position)
    new_site.code = np.where(np.isin(code, rare), most_frequent, code)
    return new_site


def _check_complete_codon_site(site, table):
    """
    Check that the site is a non-empty codon site without gaps and
    stop codons and return its code as list.
    """
    code = _check_codon_site(site, min_length=1)
    table = _get_table(table)
    if any(table.is_stop_code(codon) for codon in code):
        raise ValueError("The site must not contain stop codons")
    return code
