# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "siteseq.sitetools"
__author__ = "The siteseq developers"
__all__ = [
    "has_gap",
    "has_unknown",
    "is_complete",
    "is_constant",
    "are_sites_identical",
]

from ..alphabet import GAP_CODE
from ..site import Site


def has_gap(site):
    """
    Check whether a site contains at least one gap.

    Parameters
    ----------
    site : Site
        The site to check.

    Returns
    -------
    gap : bool
        True, if the site contains a gap.
    """
    return bool((_check_site(site).code == GAP_CODE).any())


def has_unknown(site):
    """
    Check whether a site contains at least one unknown state.

    Only alphabets that define an unknown state, like the
    :class:`AllelicAlphabet`, can give a positive result.

    Parameters
    ----------
    site : Site
        The site to check.

    Returns
    -------
    unknown : bool
        True, if the site contains the unknown code of its alphabet.
    """
    alphabet = _check_site(site).get_alphabet()
    if not hasattr(alphabet, "get_unknown_code"):
        return False
    return bool((site.code == alphabet.get_unknown_code()).any())


def is_complete(site):
    """
    Check whether a site contains neither gaps nor unknown states.

    Parameters
    ----------
    site : Site
        The site to check.

    Returns
    -------
    complete : bool
        True, if the site is complete.
    """
    return not has_gap(site) and not has_unknown(site)


def is_constant(site, ignore_gap=False):
    """
    Check whether all sequences in a site have the same state.

    Parameters
    ----------
    site : Site
        The site to check.
    ignore_gap : bool, optional
        If true, gaps are not considered.

    Returns
    -------
    constant : bool
        True, if the site contains only one distinct symbol code.

    Raises
    ------
    ValueError
        If the site is empty, or if it contains only gaps while
        `ignore_gap` is true.
    """
    code = _check_site(site).code
    if ignore_gap:
        code = code[code != GAP_CODE]
    if len(code) == 0:
        raise ValueError("Cannot determine whether an empty site is constant")
    return bool((code == code[0]).all())


def are_sites_identical(site1, site2):
    """
    Check whether two sites have the same alphabet and content,
    regardless of their positions.
    """
    return _check_site(site1) == _check_site(site2)


def _check_site(site):
    if not isinstance(site, Site):
        raise TypeError(f"Expected a 'Site', not '{type(site).__name__}'")
    return site
