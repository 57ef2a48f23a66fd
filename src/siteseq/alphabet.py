# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "siteseq"
__author__ = "The siteseq developers"
__all__ = [
    "Alphabet",
    "LetterAlphabet",
    "GAP_CODE",
    "GAP_SYMBOL",
    "DNA_ALPHABET",
    "RNA_ALPHABET",
    "PROTEIN_ALPHABET",
]

import string
import numpy as np
from .error import AlphabetError, IndexOutOfRangeError


# Gaps are not part of any alphabet, they get this reserved code
GAP_CODE = -1
GAP_SYMBOL = "-"


class Alphabet(object):
    """
    The ordered set of states a site may take.

    Sites store their content as *symbol codes*: the symbol code of a
    symbol is its *rank*, i.e. its position in the symbol list given to
    the constructor.
    A symbol can be any hashable object, although most alphabets
    consist of single letters or short strings.
    Gaps are not part of an alphabet, instead every alphabet uses the
    reserved code :data:`GAP_CODE`.

    An :class:`Alphabet` cannot be changed after creation.

    Parameters
    ----------
    symbols : iterable object
        The symbols of the alphabet, in the order of their codes.

    Examples
    --------
    Translate between nucleotides and their codes:

    >>> alph = Alphabet(["A","C","G","T"])
    >>> print(alph.encode("G"))
    2
    >>> print(alph.decode(2))
    G
    >>> try:
    ...    alph.encode("foo")
    ... except Exception as e:
    ...    print(e)
    Symbol 'foo' is not in the alphabet
    """

    def __init__(self, symbols):
        if len(symbols) == 0:
            raise ValueError("Symbol list is empty")
        self._symbols = tuple(symbols)
        self._symbol_dict = {}
        for i, symbol in enumerate(self._symbols):
            # Keep the first occurrence of duplicate symbols
            self._symbol_dict.setdefault(symbol, i)

    def __repr__(self):
        return f"Alphabet({self._symbols})"

    def get_symbols(self):
        """
        Get the symbols ordered by their symbol code.

        Returns
        -------
        symbols : tuple
            The symbols.
        """
        return self._symbols

    def get_symbol_width(self):
        """
        Get the common length of the string representation of all
        symbols.

        Returns
        -------
        width : int or None
            The length of ``str(symbol)``, that is shared by all
            symbols.
            ``None``, if the symbols have different lengths.
        """
        widths = set(len(str(symbol)) for symbol in self.get_symbols())
        if len(widths) != 1:
            return None
        return widths.pop()

    def encode(self, symbol):
        """
        Get the symbol code (rank) of a symbol.

        Parameters
        ----------
        symbol : object
            A symbol of this alphabet.

        Returns
        -------
        code : int
            The rank of `symbol`.

        Raises
        ------
        AlphabetError
            If the alphabet does not contain `symbol`.
        """
        try:
            return self._symbol_dict[symbol]
        except (KeyError, TypeError):
            raise AlphabetError(f"Symbol {repr(symbol)} is not in the alphabet")

    def decode(self, code):
        """
        Get the symbol with the given symbol code (rank).

        Parameters
        ----------
        code : int
            A symbol code in the range ``0`` to ``len(alphabet) - 1``.

        Returns
        -------
        symbol : object
            The symbol at rank `code`.

        Raises
        ------
        AlphabetError
            If `code` is out of range.
        """
        if code < 0 or code >= len(self._symbols):
            raise AlphabetError(f"'{code:d}' is not a valid code")
        return self._symbols[code]

    def encode_multiple(self, symbols, dtype=np.int64):
        """
        Get the symbol codes for a sequence of symbols.

        Parameters
        ----------
        symbols : iterable object
            Symbols of this alphabet.
        dtype : dtype, optional
            The integer type of the returned array.

        Returns
        -------
        code : ndarray
            One symbol code for each symbol.
        """
        return np.array([self.encode(symbol) for symbol in symbols], dtype=dtype)

    def decode_multiple(self, code):
        """
        Get the symbols for a sequence of symbol codes.

        Parameters
        ----------
        code : iterable object of int
            Valid symbol codes.

        Returns
        -------
        symbols : list
            One symbol for each code.
        """
        return [self.decode(c) for c in code]

    def is_resolved_in(self, code, state):
        """
        Check whether the symbol code `code` is compatible with the
        state `state`.

        For a plain alphabet this is only the case if both codes are
        equal.
        Subclasses with ambiguous codes, like the
        :class:`AllelicAlphabet`, extend this relation.

        Parameters
        ----------
        code : int
            The symbol code to check, may also be the gap code.
        state : int
            The state (symbol code) `code` is checked against.

        Returns
        -------
        resolved : bool
            True, if `code` is compatible with `state`.

        Raises
        ------
        IndexOutOfRangeError
            If any of the codes is not valid in this alphabet.
        """
        if code < GAP_CODE or code >= len(self):
            raise IndexOutOfRangeError(f"'{code:d}' is not a valid code")
        if state < 0 or state >= len(self):
            raise IndexOutOfRangeError(f"'{state:d}' is not a valid state")
        return code == state

    def is_letter_alphabet(self):
        """
        Whether this alphabet could also be represented as
        :class:`LetterAlphabet`.

        Returns
        -------
        is_letter_alphabet : bool
            True, if each symbol is a single printable ASCII character,
            given as `str` or `bytes`.
        """
        for symbol in self:
            if not isinstance(symbol, (str, bytes)) or len(symbol) != 1:
                return False
            if isinstance(symbol, str):
                if not symbol.isascii():
                    return False
                symbol = symbol.encode("ASCII")
            if symbol not in LetterAlphabet.PRINTABLES:
                return False
        return True

    def __str__(self):
        return str(self.get_symbols())

    def __len__(self):
        return len(self.get_symbols())

    def __iter__(self):
        return self.get_symbols().__iter__()

    def __contains__(self, symbol):
        return symbol in self.get_symbols()

    def __hash__(self):
        return hash(tuple(self.get_symbols()))

    def __eq__(self, item):
        if item is self:
            return True
        if not isinstance(item, Alphabet):
            return False
        return tuple(self.get_symbols()) == tuple(item.get_symbols())


class LetterAlphabet(Alphabet):
    """
    An :class:`Alphabet` whose symbols are single printable ASCII
    characters, such as nucleotides or amino acids.

    The symbols are held as ASCII values in a *NumPy* array, together
    with a table that maps every ASCII value to its symbol code.
    Hence, whole strings of symbols are encoded and decoded in a
    vectorized manner.

    Parameters
    ----------
    symbols : iterable object or str or bytes
        The letters of the alphabet, in the order of their codes.
        At most the 94 printable non-whitespace ASCII characters are
        allowed.
    """

    PRINTABLES = (string.digits + string.ascii_letters + string.punctuation).encode(
        "ASCII"
    )

    def __init__(self, symbols):
        if len(symbols) == 0:
            raise ValueError("Symbol list is empty")
        ascii_values = []
        for symbol in symbols:
            if not isinstance(symbol, (str, bytes)) or len(symbol) != 1:
                raise ValueError(f"Symbol '{symbol}' is not a single letter")
            if isinstance(symbol, str):
                if not symbol.isascii():
                    raise ValueError(f"Symbol {repr(symbol)} is not ASCII")
                symbol = symbol.encode("ASCII")
            if symbol not in LetterAlphabet.PRINTABLES:
                raise ValueError(
                    f"Symbol {repr(symbol)} is not printable or whitespace"
                )
            ascii_values.append(ord(symbol))
        self._symbols = np.array(ascii_values, dtype=np.ubyte)
        # -1 marks ASCII values that are not part of the alphabet
        self._lookup = np.full(256, -1, dtype=np.int64)
        # Assign in reverse order, so that the first occurrence of a
        # duplicate symbol wins
        codes = np.arange(len(self._symbols), dtype=np.int64)
        self._lookup[self._symbols[::-1]] = codes[::-1]

    def __repr__(self):
        return f"LetterAlphabet({self.get_symbols()})"

    def get_symbols(self):
        return tuple([chr(value) for value in self._symbols])

    def get_symbol_width(self):
        return 1

    def encode(self, symbol):
        if not isinstance(symbol, (str, bytes)) or len(symbol) != 1:
            raise AlphabetError(f"Symbol '{symbol}' is not a single letter")
        value = ord(symbol)
        if value > 255 or self._lookup[value] == -1:
            raise AlphabetError(f"Symbol {repr(symbol)} is not in the alphabet")
        return self._lookup[value].item()

    def decode(self, code):
        if code < 0 or code >= len(self._symbols):
            raise AlphabetError(f"'{code:d}' is not a valid code")
        return chr(self._symbols[code])

    def encode_multiple(self, symbols, dtype=None):
        """
        Get the symbol codes for a sequence of letters.

        Parameters
        ----------
        symbols : iterable object or str or bytes
            The letters.
            A :class:`str`, :class:`bytes` or :class:`ndarray` is
            converted without iterating over the single letters.
        dtype : dtype, optional
            Ignored, the codes are always unsigned bytes.

        Returns
        -------
        code : ndarray, dtype=uint8
            One symbol code for each letter.
        """
        try:
            if isinstance(symbols, str):
                values = np.frombuffer(symbols.encode("ASCII"), dtype=np.ubyte)
            elif isinstance(symbols, bytes):
                values = np.frombuffer(symbols, dtype=np.ubyte)
            elif isinstance(symbols, np.ndarray):
                values = np.frombuffer(symbols.astype(dtype="|S1"), dtype=np.ubyte)
            else:
                symbols = list(symbols)
                for symbol in symbols:
                    if not isinstance(symbol, (str, bytes)) or len(symbol) != 1:
                        raise AlphabetError(
                            f"Symbol {repr(symbol)} is not a single letter"
                        )
                values = np.frombuffer(
                    np.array(symbols, dtype="|S1"), dtype=np.ubyte
                )
        except UnicodeEncodeError:
            raise AlphabetError("Symbols contain non-ASCII characters")
        codes = self._lookup[values]
        invalid = np.where(codes == -1)[0]
        if len(invalid) > 0:
            symbol = chr(values[invalid[0]])
            raise AlphabetError(f"Symbol {repr(symbol)} is not in the alphabet")
        return codes.astype(np.uint8)

    def decode_multiple(self, code, as_bytes=False):
        """
        Get the letters for a sequence of symbol codes.

        Parameters
        ----------
        code : array-like of int
            Valid symbol codes.
        as_bytes : bool, optional
            If true, the letters are returned as `bytes` (dtype
            ``'S1'``), otherwise as `str` (dtype ``'U1'``).

        Returns
        -------
        symbols : ndarray, dtype='U1' or dtype='S1'
            One letter for each code.
        """
        code = np.asarray(code)
        if len(code) > 0:
            invalid = np.where((code < 0) | (code >= len(self._symbols)))[0]
            if len(invalid) > 0:
                raise AlphabetError(f"'{code[invalid[0]]:d}' is not a valid code")
        symbols = self._symbols[code.astype(np.int64, copy=False)]
        # Symbols must be converted from 'np.ubyte' to '|S1'
        symbols = np.frombuffer(symbols.tobytes(), dtype="|S1")
        if not as_bytes:
            symbols = symbols.astype("U1")
        return symbols

    def is_letter_alphabet(self):
        return True

    def __contains__(self, symbol):
        if not isinstance(symbol, (str, bytes)) or len(symbol) != 1:
            return False
        value = ord(symbol)
        return value <= 255 and self._lookup[value] != -1

    def __len__(self):
        return len(self._symbols)


DNA_ALPHABET = LetterAlphabet("ACGT")
RNA_ALPHABET = LetterAlphabet("ACGU")
# The 20 standard amino acids followed by the ambiguous ones and stop
PROTEIN_ALPHABET = LetterAlphabet("ACDEFGHIKLMNPQRSTVWYBZX*")
