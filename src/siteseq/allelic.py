# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "siteseq"
__author__ = "The siteseq developers"
__all__ = ["AllelicAlphabet"]

from math import lgamma
from numbers import Integral
import numpy as np
from .alphabet import GAP_CODE, GAP_SYMBOL, Alphabet
from .error import (
    AlphabetError,
    ConfigurationError,
    DimensionMismatchError,
    IndexOutOfRangeError,
    InvalidSymbolError,
)

UNKNOWN_SYMBOL = "?"


class AllelicAlphabet(Alphabet):
    """
    An alphabet of allelic states, i.e. unordered pairs of states from a
    base alphabet, each one with the number of copies it has in a sample
    of `nb_alleles` alleles.

    A symbol of this alphabet is a label of the form
    ``<state 1><count 1><state 2><count 2>``, where the counts sum up to
    `nb_alleles`.
    The counts are written as decimal numbers, zero-padded to the number
    of digits of `nb_alleles`, hence all labels have the same width.
    For example, ``'A3C1'`` denotes three copies of ``A`` and one copy
    of ``C`` in a sample of four alleles.
    The state ranked first in the base alphabet is always written first:
    ``'A3C1'`` is valid, but ``'C1A3'`` is not.

    The symbol codes are assigned as follows:

        - ``-1``: gap
        - ``0`` to ``n - 1``: the states of the base alphabet with size
          *n*, i.e. all alleles are the same state (homozygous).
          These codes are labeled as ``'A4A0'``.
        - ``n`` to ``n + n(n-1)/2 * (N-1) - 1``: for each pair of
          states *(i, j)* with *i < j* and for each number
          *k = 1 ... N-1* of copies of *i* one code.
          The pairs are ordered by *i* and then by *j*, within a pair the
          code increases with *k*.
        - ``n + n(n-1)/2 * (N-1)``: the unknown state, labeled as
          ``'?4?0'``.

    :class:`AllelicAlphabet` objects are immutable.

    Parameters
    ----------
    alphabet : Alphabet
        The base alphabet.
        The string representations of all its symbols must have the same
        length.
    nb_alleles : int
        The number of alleles *N* in the sample, at least 1.

    Examples
    --------

    >>> alph = AllelicAlphabet(DNA_ALPHABET, 4)
    >>> print(alph.get_size())
    22
    >>> print(alph.encode("A3C1"))
    6
    >>> print(alph.decode(6))
    A3C1
    >>> print(alph.encode("G4G0"))
    2
    """

    def __init__(self, alphabet, nb_alleles):
        if (
            isinstance(nb_alleles, bool)
            or not isinstance(nb_alleles, Integral)
            or nb_alleles < 1
        ):
            raise ConfigurationError(
                f"The number of alleles must be a positive integer, "
                f"got {nb_alleles!r}"
            )
        state_width = alphabet.get_symbol_width()
        if state_width is None:
            raise ConfigurationError(
                "The symbols of the base alphabet must have the same width"
            )
        self._state_alphabet = alphabet
        self._nb_alleles = int(nb_alleles)
        self._state_width = state_width
        self._count_width = len(str(self._nb_alleles))
        self._base_size = len(alphabet)

        self._base_symbols = [str(symbol) for symbol in alphabet.get_symbols()]
        self._ranks = {}
        for rank, symbol in enumerate(self._base_symbols):
            self._ranks.setdefault(symbol, rank)
        n = self._base_size
        # The pairs of different states in the order of their codes
        self._pairs = [(i, j) for i in range(n) for j in range(i + 1, n)]
        self._unknown_code = n + len(self._pairs) * (self._nb_alleles - 1)

        self._gap_label = self._format(
            GAP_SYMBOL * state_width,
            self._nb_alleles,
            GAP_SYMBOL * state_width,
            0,
        )
        self._unknown_label = self._format(
            UNKNOWN_SYMBOL * state_width,
            self._nb_alleles,
            UNKNOWN_SYMBOL * state_width,
            0,
        )
        super().__init__(
            [self._create_label(code) for code in range(self._unknown_code + 1)]
        )

    def __repr__(self):
        """Represent AllelicAlphabet as a string for debugging."""
        return f"AllelicAlphabet({self._state_alphabet!r}, {self._nb_alleles})"

    def get_state_alphabet(self):
        """
        Get the base alphabet.

        Returns
        -------
        alphabet : Alphabet
            The base alphabet.
        """
        return self._state_alphabet

    def get_nb_alleles(self):
        """
        Get the number of alleles in a sample.

        Returns
        -------
        nb_alleles : int
            The number of alleles.
        """
        return self._nb_alleles

    def get_size(self):
        """
        Get the number of resolved states.

        These are all codes except the gap and the unknown code.

        Returns
        -------
        size : int
            The number of resolved states, i.e.
            ``n + n(n-1)/2 * (nb_alleles-1)``.
        """
        return self._unknown_code

    def get_number_of_types(self):
        """
        Get the number of resolved states plus one for the gap.

        Returns
        -------
        number : int
            ``get_size() + 1``.
        """
        return self._unknown_code + 1

    def get_unknown_code(self):
        """
        Get the code of the unknown state.

        Returns
        -------
        code : int
            The unknown code, which is the highest code of the alphabet.
        """
        return self._unknown_code

    def get_symbol_width(self):
        return 2 * (self._state_width + self._count_width)

    def __contains__(self, symbol):
        # Non-canonical labels and the gap label are accepted as well
        try:
            self.encode(symbol)
        except AlphabetError:
            return False
        return True

    def is_unresolved(self, code):
        return code == self._unknown_code

    def encode(self, symbol):
        """
        Encode an allelic state label into its symbol code.

        Labels, where both states are equal (e.g. ``'A2A2'``) or where
        one state has no copies (e.g. ``'A4C0'``), are homozygous and
        are encoded as the code of the state in the base alphabet.

        Parameters
        ----------
        symbol : str
            The label to encode.

        Returns
        -------
        code : int
            The symbol code of `symbol`.

        Raises
        ------
        InvalidSymbolError
            If the label is malformed, contains unknown states or lists
            the states in non-canonical order.
        """
        if not isinstance(symbol, str) or len(symbol) != self.get_symbol_width():
            raise InvalidSymbolError(
                f"Label {symbol!r} does not have the expected width of "
                f"{self.get_symbol_width()} characters"
            )
        if symbol == self._gap_label:
            return GAP_CODE
        if symbol == self._unknown_label:
            return self._unknown_code

        sw = self._state_width
        cw = self._count_width
        state1 = symbol[:sw]
        count1 = self._parse_count(symbol[sw : sw + cw], symbol)
        state2 = symbol[sw + cw : 2 * sw + cw]
        count2 = self._parse_count(symbol[2 * sw + cw :], symbol)
        if count1 + count2 != self._nb_alleles:
            raise InvalidSymbolError(
                f"The counts in label {symbol!r} do not sum up to "
                f"{self._nb_alleles}"
            )

        # Homozygous shorthand: the partner without copies is ignored
        if count2 == 0:
            if state2 != GAP_SYMBOL * sw:
                self._rank(state2, symbol)
            return self._rank(state1, symbol)
        if count1 == 0:
            if state1 != GAP_SYMBOL * sw:
                self._rank(state1, symbol)
            return self._rank(state2, symbol)

        rank1 = self._rank(state1, symbol)
        rank2 = self._rank(state2, symbol)
        if rank1 == rank2:
            return rank1
        if rank1 > rank2:
            raise InvalidSymbolError(
                f"Label {symbol!r} is not in canonical order, "
                f"'{state2}' must be written before '{state1}'"
            )
        return self._pair_code(rank1, rank2, count1)

    def decode(self, code):
        """
        Decode a symbol code into its allelic state label.

        Parameters
        ----------
        code : int
            The symbol code to decode, including the gap code ``-1``.

        Returns
        -------
        symbol : str
            The label corresponding to `code`.

        Raises
        ------
        IndexOutOfRangeError
            If `code` is not a valid code in the alphabet.
        """
        self._check_code(code)
        if code == GAP_CODE:
            return self._gap_label
        return self.get_symbols()[code]

    def get_alleles(self, code):
        """
        Get the states and their numbers of copies, that are represented
        by a symbol code.

        Parameters
        ----------
        code : int
            The symbol code.

        Returns
        -------
        alleles : tuple of tuple(int, int)
            Pairs of base state code and number of copies.
            Contains one pair for homozygous states, two pairs for
            heterozygous states and is empty for the gap and the unknown
            state.
        """
        self._check_code(code)
        if code == GAP_CODE or code == self._unknown_code:
            return ()
        if code < self._base_size:
            return ((code, self._nb_alleles),)
        return self._split(code)

    def get_alias(self, code):
        """
        Get the states of the base alphabet, that are compatible with a
        symbol code.

        Parameters
        ----------
        code : int
            The symbol code.

        Returns
        -------
        states : list of int
            The compatible base state codes.
            The unknown state is compatible with all states, the gap with
            none.
        """
        self._check_code(code)
        if code == GAP_CODE:
            return []
        if code == self._unknown_code:
            return list(range(self._base_size))
        return [state for state, _ in self.get_alleles(code)]

    def is_resolved_in(self, code, state):
        """
        Check whether the base state `state` is one of the alleles
        present in the allelic state `code`.

        Parameters
        ----------
        code : int
            The allelic symbol code.
        state : int
            The code of a state in the base alphabet.

        Returns
        -------
        resolved : bool
            True, if `code` is compatible with `state`.

        Raises
        ------
        IndexOutOfRangeError
            If `code` is not a valid allelic code or `state` is not a
            valid base state.
        """
        self._check_code(code)
        if state < 0 or state >= self._base_size:
            raise IndexOutOfRangeError(f"'{state:d}' is not a valid base state")
        return state in self.get_alias(code)

    def translate(self, codes):
        """
        Convert symbol codes of the base alphabet into symbol codes of
        this alphabet.

        Since the base states are the first states of the allelic
        alphabet, the codes stay the same; gaps remain gaps.

        Parameters
        ----------
        codes : int or array-like of int
            Symbol codes in the base alphabet, ``-1`` for gaps.

        Returns
        -------
        codes : int or ndarray, dtype=int64
            The symbol codes in this alphabet.
        """
        codes = np.asarray(codes, dtype=np.int64)
        is_scalar = codes.ndim == 0
        codes = np.atleast_1d(codes)
        invalid = codes[(codes < GAP_CODE) | (codes >= self._base_size)]
        if len(invalid) > 0:
            raise IndexOutOfRangeError(
                f"'{invalid[0]:d}' is not a valid code in the base alphabet"
            )
        if is_scalar:
            return codes[0].item()
        return codes.copy()

    def compute_likelihoods(self, counts, out=None):
        """
        Compute the likelihood of each allelic state given the observed
        counts of each base state.

        The alleles of a sample are modeled as *N* draws from the
        observed counts.
        If the counts are distributed over two states *i* and *j*, the
        likelihood of *k* copies of *i* is the binomial probability
        ``C(N,k) p^k (1-p)^(N-k)`` with ``p`` being the proportion of
        counts of *i*.
        If the counts are on a single state, the corresponding
        homozygous state has likelihood 1.
        If the counts are distributed over more than two states, they
        cannot be explained by any resolved state and only the unknown
        state has likelihood 1.
        If all counts are zero, there is no observation and all states
        have likelihood 1.
        The likelihoods are not normalized.

        Parameters
        ----------
        counts : array-like, shape=(n,)
            The non-negative counts of each state of the base alphabet.
        out : ndarray, shape=(k,), dtype=float, optional
            If given, the likelihoods are written into this array,
            whose length must be ``get_size() + 1``.

        Returns
        -------
        likelihoods : ndarray, shape=(k,), dtype=float
            The likelihood of each symbol code, including the unknown
            code as last element.

        Examples
        --------

        >>> alph = AllelicAlphabet(DNA_ALPHABET, 4)
        >>> likelihoods = alph.compute_likelihoods([3, 1, 0, 0])
        >>> print(round(likelihoods[alph.encode("A3C1")], 4))
        0.4219
        >>> print(round(likelihoods[alph.encode("A4A0")], 4))
        0.3164
        """
        counts = np.asarray(counts, dtype=np.float64)
        if counts.shape != (self._base_size,):
            raise DimensionMismatchError(
                f"Expected {self._base_size} counts, got shape {counts.shape}"
            )
        if np.isnan(counts).any() or (counts < 0).any():
            raise ValueError("Counts must be non-negative")
        if out is None:
            out = np.zeros(self._unknown_code + 1, dtype=np.float64)
        else:
            if not isinstance(out, np.ndarray):
                raise TypeError(
                    f"Output must be an ndarray, not {type(out).__name__}"
                )
            if out.shape != (self._unknown_code + 1,):
                raise DimensionMismatchError(
                    f"Expected an output array of length "
                    f"{self._unknown_code + 1}, got shape {out.shape}"
                )
            out[:] = 0

        observed = np.nonzero(counts > 0)[0]
        if len(observed) == 0:
            out[:] = 1
        elif len(observed) == 1:
            out[observed[0]] = 1
        elif len(observed) == 2:
            i, j = observed
            n_alleles = self._nb_alleles
            p = counts[i] / (counts[i] + counts[j])
            pmf = _binomial_pmf(n_alleles, p)
            # All copies from one of the states -> homozygous codes
            out[i] = pmf[n_alleles]
            out[j] = pmf[0]
            first = self._pair_code(i, j, 1)
            out[first : first + n_alleles - 1] = pmf[1:n_alleles]
        else:
            out[self._unknown_code] = 1
        return out

    def convert_counts(self, counts):
        """
        Compute the likelihoods of the allelic states for multiple count
        vectors, e.g. the counts of one sequence at each position.

        Parameters
        ----------
        counts : array-like, shape=(m,n)
            The non-negative counts of each state of the base alphabet
            for *m* positions.

        Returns
        -------
        likelihoods : ndarray, shape=(m,k), dtype=float
            The likelihoods of each symbol code for each position,
            as computed by :meth:`compute_likelihoods()`.
        """
        counts = np.asarray(counts, dtype=np.float64)
        if counts.ndim != 2 or counts.shape[1] != self._base_size:
            raise DimensionMismatchError(
                f"Expected counts of shape (m, {self._base_size}), "
                f"got shape {counts.shape}"
            )
        likelihoods = np.zeros(
            (counts.shape[0], self._unknown_code + 1), dtype=np.float64
        )
        for row, count_vector in enumerate(counts):
            self.compute_likelihoods(count_vector, out=likelihoods[row])
        return likelihoods

    def _format(self, state1, count1, state2, count2):
        w = self._count_width
        return f"{state1}{count1:0{w}d}{state2}{count2:0{w}d}"

    def _create_label(self, code):
        if code == self._unknown_code:
            return self._unknown_label
        if code < self._base_size:
            symbol = self._base_symbols[code]
            return self._format(symbol, self._nb_alleles, symbol, 0)
        (i, count1), (j, count2) = self._split(code)
        return self._format(
            self._base_symbols[i], count1, self._base_symbols[j], count2
        )

    def _pair_code(self, rank1, rank2, count1):
        n = self._base_size
        # Number of pairs (i, j) with i < rank1
        # plus the offset of rank2 within the pairs starting with rank1
        pair_index = rank1 * (n - 1) - rank1 * (rank1 - 1) // 2 + (rank2 - rank1 - 1)
        return n + pair_index * (self._nb_alleles - 1) + (count1 - 1)

    def _split(self, code):
        pair_index, split = divmod(code - self._base_size, self._nb_alleles - 1)
        i, j = self._pairs[pair_index]
        count1 = split + 1
        return (i, count1), (j, self._nb_alleles - count1)

    def _rank(self, state, label):
        try:
            return self._ranks[state]
        except KeyError:
            raise InvalidSymbolError(
                f"State '{state}' in label {label!r} is not in the base alphabet"
            )

    def _parse_count(self, text, label):
        if not (text.isascii() and text.isdigit()):
            raise InvalidSymbolError(f"Label {label!r} contains an invalid count")
        return int(text)

    def _check_code(self, code):
        if not isinstance(code, Integral):
            raise TypeError(f"Symbol code must be an integer, not {type(code).__name__}")
        if code < GAP_CODE or code > self._unknown_code:
            raise IndexOutOfRangeError(f"'{code:d}' is not a valid code")


def _binomial_pmf(n, p):
    """
    Probability of each number of successes ``0 ... n`` in *n* Bernoulli
    trials with success probability *p*.
    """
    if p == 0 or p == 1:
        # Degenerate distribution
        pmf = np.zeros(n + 1, dtype=np.float64)
        pmf[n if p == 1 else 0] = 1
        return pmf
    k = np.arange(n + 1)
    log_binom = np.array(
        [lgamma(n + 1) - lgamma(x + 1) - lgamma(n - x + 1) for x in range(n + 1)]
    )
    return np.exp(log_binom + k * np.log(p) + (n - k) * np.log1p(-p))
