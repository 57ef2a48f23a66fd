# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "siteseq.codonsite"
__author__ = "The siteseq developers"
__all__ = [
    "number_of_substitutions",
    "number_of_non_synonymous_substitutions",
    "fixed_differences",
]

from .differences import (
    _check_codon_site,
    _get_table,
    _to_bases,
    _to_codon,
    number_of_differences,
    number_of_synonymous_differences,
)
from .polymorphism import remove_rare_variants


def number_of_substitutions(site, table=None, freqmin=0.0):
    """
    Count the nucleotide substitutions in a codon site.

    No recombination between codons is assumed:
    the distinct codons of the site are connected by a minimum spanning
    tree, whose edges are weighted by the number of nucleotide
    differences, and the substitutions along this tree are counted.
    For example, the codons ``ATT``, ``ATC``, ``AGT`` and ``AGC`` give
    three substitutions, although ``AGC`` could also be explained by a
    recombination of ``ATC`` and ``AGT``.

    Parameters
    ----------
    site : Site
        The site over the :data:`CODON_ALPHABET`.
        The site must not be empty and must neither contain gaps nor
        stop codons.
    table : CodonTable, optional
        The genetic code.
        By default the :func:`CodonTable.default_table()` is used.
    freqmin : float, optional
        Codons with a relative frequency strictly lower than this value
        are treated as the most frequent codon of the site
        (see :func:`remove_rare_variants()`).

    Returns
    -------
    substitutions : int
        The number of substitutions.

    Examples
    --------

    >>> site = Site(CODON_ALPHABET, ["ATT", "ATT", "ATC", "AGT", "AGC"])
    >>> print(number_of_substitutions(site))
    3
    >>> print(number_of_substitutions(site, freqmin=0.3))
    0
    """
    edges = _substitution_tree(site, table, freqmin)
    return sum(differences for differences, _ in edges)


def number_of_non_synonymous_substitutions(site, table=None, freqmin=0.0):
    """
    Count the non-synonymous nucleotide substitutions in a codon site.

    The substitutions are counted along the same tree as in
    :func:`number_of_substitutions()`.
    Between two codons differing at multiple positions the mutational
    path with the fewest non-synonymous changes is assumed.

    Parameters
    ----------
    site : Site
        The site over the :data:`CODON_ALPHABET`.
        The site must not be empty and must neither contain gaps nor
        stop codons.
    table : CodonTable, optional
        The genetic code.
        By default the :func:`CodonTable.default_table()` is used.
    freqmin : float, optional
        Codons with a relative frequency strictly lower than this value
        are treated as the most frequent codon of the site.

    Returns
    -------
    substitutions : int
        The number of non-synonymous substitutions.
    """
    edges = _substitution_tree(site, table, freqmin)
    return sum(non_synonymous for _, non_synonymous in edges)


def fixed_differences(site_in, site_out, codon_in, codon_out, table=None):
    """
    Count the synonymous and non-synonymous differences between two
    codons, that are fixed within their respective codon sites.

    Typically, `site_in` and `site_out` are the same codon site in an
    ingroup and an outgroup alignment and `codon_in` and `codon_out` are
    their consensus codons.
    A nucleotide position is a fixed difference, if `codon_in` and
    `codon_out` differ at this position and the position is monomorphic
    in both sites.
    Differences at polymorphic positions are not counted.

    Parameters
    ----------
    site_in, site_out : Site
        The sites over the :data:`CODON_ALPHABET`.
        The sites must not be empty and must not contain gaps.
    codon_in, codon_out : int
        The codons that are compared, as symbol codes in the
        :data:`CODON_ALPHABET`.
    table : CodonTable, optional
        The genetic code.
        By default the :func:`CodonTable.default_table()` is used.

    Returns
    -------
    synonymous, non_synonymous : int
        The number of fixed synonymous and non-synonymous differences.
        Between codons differing at multiple fixed positions the
        mutational path with the fewest non-synonymous changes is
        assumed.

    Examples
    --------

    The first position is a fixed non-synonymous difference, the third
    position differs as well but it is polymorphic in `site_in`:

    >>> site_in = Site(CODON_ALPHABET, ["ATT", "ATT", "ATC"])
    >>> site_out = Site(CODON_ALPHABET, ["CTA", "CTA", "CTA"])
    >>> print(fixed_differences(
    ...     site_in, site_out,
    ...     CODON_ALPHABET.encode("ATT"), CODON_ALPHABET.encode("CTA")
    ... ))
    (0, 1)
    """
    table = _get_table(table)
    code_in = _check_codon_site(site_in, min_length=1)
    code_out = _check_codon_site(site_out, min_length=1)
    bases_in = _to_bases(codon_in)
    bases_out = _to_bases(codon_out)

    target = list(bases_in)
    for position in range(3):
        if bases_in[position] == bases_out[position]:
            continue
        if _is_monomorphic(code_in, position) and _is_monomorphic(
            code_out, position
        ):
            target[position] = bases_out[position]
    target = _to_codon(target)

    differences = number_of_differences(codon_in, target)
    synonymous = round(
        number_of_synonymous_differences(codon_in, target, table, minchange=True)
    )
    return synonymous, differences - synonymous


def _is_monomorphic(code, position):
    return len(set(_to_bases(codon)[position] for codon in code)) == 1


def _substitution_tree(site, table, freqmin):
    """
    Connect the distinct codons of a site by a minimum spanning tree
    (Prim's algorithm).

    Edges are weighted by the number of differences and, for equal
    numbers, by the minimum number of non-synonymous differences.
    Return the weights of the tree edges as list of
    *(differences, non-synonymous differences)* tuples.
    """
    table = _get_table(table)
    code = remove_rare_variants(site, freqmin, table).code.tolist()
    remaining = sorted(set(code))
    in_tree = [remaining.pop(0)]
    edges = []
    while len(remaining) > 0:
        best_weight = None
        best_codon = None
        for codon in remaining:
            for tree_codon in in_tree:
                weight = _edge_weight(tree_codon, codon, table)
                if best_weight is None or weight < best_weight:
                    best_weight = weight
                    best_codon = codon
        edges.append(best_weight)
        in_tree.append(best_codon)
        remaining.remove(best_codon)
    return edges


def _edge_weight(codon1, codon2, table):
    differences = number_of_differences(codon1, codon2)
    synonymous = round(
        number_of_synonymous_differences(codon1, codon2, table, minchange=True)
    )
    return differences, differences - synonymous
