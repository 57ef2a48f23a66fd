# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
The different site types, i.e. the content of an alignment column.
"""

__name__ = "siteseq"
__author__ = "The siteseq developers"
__all__ = ["AbstractSite", "Site", "ProbabilisticSite"]

import abc
from numbers import Integral
import numpy as np
from .alphabet import GAP_CODE, GAP_SYMBOL
from .copyable import Copyable
from .error import AlphabetError, DimensionMismatchError, IndexOutOfRangeError


class AbstractSite(Copyable, metaclass=abc.ABCMeta):
    """
    The abstract base class for all sites.

    A site is an alignment column: it stores one value for each
    sequence (row) of an alignment at a certain position.
    The values refer to the states of an :class:`Alphabet`.

    Besides its content, a site carries a *position*, an integer
    coordinate that locates the site in the alignment.
    The position is no part of the site content: two sites with equal
    alphabet and equal values are equal, regardless of their position.

    Parameters
    ----------
    alphabet : Alphabet
        The alphabet of the site.
    position : int, optional
        The coordinate of the site.
    """

    def __init__(self, alphabet, position=0):
        self._alphabet = alphabet
        self._position = int(position)

    def __copy_create__(self):
        return type(self)(self._alphabet, position=self._position)

    def get_alphabet(self):
        """
        Get the alphabet of this site.

        Returns
        -------
        alphabet : Alphabet
            The alphabet.
        """
        return self._alphabet

    @property
    def position(self):
        return self._position

    @position.setter
    def position(self, value):
        self._position = int(value)

    @abc.abstractmethod
    def content_key(self):
        """
        Get a hashable representation of the values of this site.

        Two sites of the same type and alphabet have equal content, if
        and only if their keys are equal.
        The key can be used to look up equal sites in a dictionary.

        Returns
        -------
        key : tuple
            The key.
        """
        pass

    @abc.abstractmethod
    def get_value(self, index):
        """
        Get the value of the sequence at the given row.

        Parameters
        ----------
        index : int
            The row index.

        Returns
        -------
        value
            The value of the sequence at this site.
        """
        pass

    @abc.abstractmethod
    def state_value(self, index, state):
        """
        Get the probability-like value, that the sequence at the given
        row has the given state.

        Parameters
        ----------
        index : int
            The row index.
        state : int
            The state code.

        Returns
        -------
        value : float
            The value.
        """
        pass

    def _check_row(self, index):
        if not isinstance(index, Integral):
            raise TypeError(f"Row index must be an integer, not {type(index).__name__}")
        if index < 0 or index >= len(self):
            raise IndexOutOfRangeError(
                f"Row index {index} is out of range for a site with "
                f"{len(self)} sequences"
            )

    def __eq__(self, item):
        if item is self:
            return True
        if not isinstance(item, AbstractSite):
            return False
        if type(item) is not type(self):
            return False
        if item.get_alphabet() != self._alphabet:
            return False
        return item.content_key() == self.content_key()

    # Sites are mutable
    __hash__ = None


class Site(AbstractSite):
    """
    A site with a single state for each sequence.

    The states are stored as symbol codes in a *NumPy*
    :class:`ndarray`.
    Gaps get the code ``-1``; when the site is created from symbols,
    ``'-'`` is interpreted as gap, unless it is part of the alphabet.

    Parameters
    ----------
    alphabet : Alphabet
        The alphabet of the site.
    symbols : iterable object, optional
        The symbol of each sequence.
        For alphabets containing single letter strings, this parameter
        may also be a :class:`str` object.
        By default the site is empty.
    position : int, optional
        The coordinate of the site.

    Attributes
    ----------
    code : ndarray, dtype=int64
        The symbol code of each sequence.
    symbols : list
        The symbol of each sequence.
    position : int
        The coordinate of the site.

    Examples
    --------

    >>> site = Site(DNA_ALPHABET, "AC-T", position=5)
    >>> print(site.code)
    [ 0  1 -1  3]
    >>> print(site)
    AC-T
    """

    def __init__(self, alphabet, symbols=(), position=0):
        super().__init__(alphabet, position)
        self.code = self._encode(list(symbols))

    def __repr__(self):
        """Represent Site as a string for debugging."""
        return (
            f"Site({self._alphabet!r}, {self.symbols!r}, "
            f"position={self._position})"
        )

    def __copy_fill__(self, clone):
        super().__copy_fill__(clone)
        clone._code = self._code.copy()

    @property
    def code(self):
        return self._code

    @code.setter
    def code(self, value):
        value = np.asarray(value)
        if value.ndim != 1:
            raise ValueError("The code of a site must be one-dimensional")
        self._code = value.astype(np.int64)

    @property
    def symbols(self):
        return [self._decode(c) for c in self._code]

    def content_key(self):
        return ("code", self._code.tobytes())

    def get_value(self, index):
        self._check_row(index)
        return self._code[index].item()

    def state_value(self, index, state):
        """
        Get the value, that the sequence at the given row has the given
        state.

        Parameters
        ----------
        index : int
            The row index.
        state : int
            The state code.

        Returns
        -------
        value : float
            1, if the symbol code at the row is resolved in `state`
            according to the alphabet, 0 otherwise.
        """
        code = self.get_value(index)
        return 1.0 if self._alphabet.is_resolved_in(code, state) else 0.0

    def is_valid(self):
        """
        Check, if the site contains only valid symbol codes.

        Returns
        -------
        valid : bool
            True, if all symbol codes are gaps or codes of the alphabet.
        """
        return bool(
            ((self._code >= GAP_CODE) & (self._code < len(self._alphabet))).all()
        )

    def _encode(self, symbols):
        code = np.full(len(symbols), GAP_CODE, dtype=np.int64)
        if GAP_SYMBOL in self._alphabet:
            non_gap = np.arange(len(symbols))
        else:
            non_gap = np.array(
                [i for i, symbol in enumerate(symbols) if symbol != GAP_SYMBOL],
                dtype=np.int64,
            )
        if len(non_gap) > 0:
            code[non_gap] = self._alphabet.encode_multiple(
                [symbols[i] for i in non_gap]
            )
        return code

    def _decode(self, code):
        if code == GAP_CODE:
            try:
                # Alphabets may define their own gap representation
                return self._alphabet.decode(GAP_CODE)
            except AlphabetError:
                return GAP_SYMBOL
        return self._alphabet.decode(code)

    def __len__(self):
        return len(self._code)

    def __getitem__(self, index):
        self._check_row(index)
        return self._decode(self._code[index])

    def __iter__(self):
        for c in self._code:
            yield self._decode(c)

    def __delitem__(self, index):
        self._check_row(index)
        self._code = np.delete(self._code, index)

    def __str__(self):
        symbols = [str(symbol) for symbol in self.symbols]
        if all(len(symbol) == 1 for symbol in symbols):
            return "".join(symbols)
        return " ".join(symbols)


class ProbabilisticSite(AbstractSite):
    """
    A site with a vector of probabilities (or likelihoods) over all
    states for each sequence.

    Parameters
    ----------
    alphabet : Alphabet
        The alphabet of the site.
    probabilities : array-like, shape=(m,k), dtype=float, optional
        For each of the *m* sequences the value of each of the *k*
        states of the alphabet.
        By default the site is empty.
    position : int, optional
        The coordinate of the site.

    Attributes
    ----------
    probabilities : ndarray, shape=(m,k), dtype=float
        For each of the *m* sequences the value of each of the *k*
        states of the alphabet.
    position : int
        The coordinate of the site.
    """

    def __init__(self, alphabet, probabilities=None, position=0):
        super().__init__(alphabet, position)
        if probabilities is None:
            probabilities = np.zeros((0, len(alphabet)), dtype=np.float64)
        self.probabilities = probabilities

    def __repr__(self):
        """Represent ProbabilisticSite as a string for debugging."""
        return (
            f"ProbabilisticSite({self._alphabet!r}, "
            f"np.{np.array_repr(self._probabilities)}, "
            f"position={self._position})"
        )

    def __copy_fill__(self, clone):
        super().__copy_fill__(clone)
        clone._probabilities = self._probabilities.copy()

    @property
    def probabilities(self):
        return self._probabilities

    @probabilities.setter
    def probabilities(self, value):
        value = np.asarray(value, dtype=np.float64)
        if value.ndim != 2 or value.shape[1] != len(self._alphabet):
            raise DimensionMismatchError(
                f"Expected probabilities of shape (m, {len(self._alphabet)}), "
                f"got shape {value.shape}"
            )
        # Adding zero turns negative zeros into positive zeros,
        # so that equal values have an equal byte representation
        self._probabilities = value + 0.0

    def content_key(self):
        return (
            "probabilities",
            self._probabilities.shape,
            self._probabilities.tobytes(),
        )

    def get_value(self, index):
        self._check_row(index)
        return self._probabilities[index].copy()

    def state_value(self, index, state):
        self._check_row(index)
        if state < 0 or state >= self._probabilities.shape[1]:
            raise IndexOutOfRangeError(f"'{state:d}' is not a valid state")
        return self._probabilities[index, state].item()

    def __len__(self):
        return self._probabilities.shape[0]

    def __getitem__(self, index):
        return self.get_value(index)

    def __iter__(self):
        for row in self._probabilities:
            yield row.copy()

    def __delitem__(self, index):
        self._check_row(index)
        self._probabilities = np.delete(self._probabilities, index, axis=0)

    def __str__(self):
        return str(self._probabilities)
