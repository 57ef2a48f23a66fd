# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
Genetic codes, i.e. the translation of codons into amino acids.
"""

__name__ = "siteseq"
__author__ = "The siteseq developers"
__all__ = ["CodonTable", "CODON_ALPHABET"]

import itertools
from os.path import join, dirname, realpath
from numbers import Integral
import numpy as np
from .alphabet import Alphabet, DNA_ALPHABET, PROTEIN_ALPHABET
from .error import IndexOutOfRangeError


_STOP_CODE = PROTEIN_ALPHABET.encode("*")
_N_BASES = len(DNA_ALPHABET)
# Place values of the three nucleotides in a codon code
_PLACE_VALUES = np.array([_N_BASES**2, _N_BASES, 1], dtype=int)

# Ordered by the nucleotide codes of the first, second and third base,
# hence the symbol code of a codon is
# 16 * code(base1) + 4 * code(base2) + code(base3)
CODON_ALPHABET = Alphabet(
    ["".join(bases) for bases in itertools.product(DNA_ALPHABET.get_symbols(), repeat=3)]
)


class CodonTable(object):
    """
    A genetic code, translating each of the 64 codons into an amino acid
    of the :data:`PROTEIN_ALPHABET`, together with a set of start
    codons.
    Stop codons translate into ``'*'``.

    A codon can be addressed in three ways:

        - as string, e.g. ``'ATG'``,
        - as triplet of :data:`DNA_ALPHABET` symbol codes,
          e.g. ``(0, 3, 2)``,
        - as symbol code in the :data:`CODON_ALPHABET`, e.g. ``14``.

    The last form is the one used for sites over the
    :data:`CODON_ALPHABET` and by the functions in :mod:`codonsite`.

    Tables from the NCBI list of genetic codes are obtained via
    :func:`load()`.
    A table cannot be changed after creation, instead
    :func:`with_start_codons()` and :func:`with_codon_mappings()` create
    modified tables.

    Parameters
    ----------
    codon_dict : dict of (str -> str)
        Amino acid (one-letter symbol) for each codon (three nucleotide
        letters).
        Every one of the 64 codons must be present.
    starts : iterable object of str
        The start codons.

    Examples
    --------

    Translate codons, given as string or as nucleotide codes:

    >>> table = CodonTable.default_table()
    >>> print(table["ATG"])
    M
    >>> print(table[(1,2,3)])
    14

    Find the codons of an amino acid, given as letter or as code:

    >>> print(table["M"])
    ('ATG',)
    >>> print(table[10])
    ((0, 3, 2),)

    Use symbol codes of the :data:`CODON_ALPHABET`:

    >>> atg = CODON_ALPHABET.encode("ATG")
    >>> print(atg)
    14
    >>> print(PROTEIN_ALPHABET.decode(table.translate_code(atg)))
    M
    >>> print(table.is_stop_code(CODON_ALPHABET.encode("TAA")))
    True
    """

    # NCBI genetic codes shipped with the package
    _table_file = join(dirname(realpath(__file__)), "codon_tables.txt")

    def __init__(self, codon_dict, starts):
        self._starts = tuple(_encode_codon(start) for start in starts)
        # Amino acid code for each codon code, -1 if not given
        self._aa_codes = np.full(len(CODON_ALPHABET), -1, dtype=int)
        for codon, amino_acid in codon_dict.items():
            self._aa_codes[_encode_codon(codon)] = PROTEIN_ALPHABET.encode(amino_acid)
        missing = np.flatnonzero(self._aa_codes == -1)
        if len(missing) > 0:
            raise ValueError(
                f"Codon dictionary does not contain codon "
                f"'{CODON_ALPHABET.decode(missing[0])}'"
            )

    def __repr__(self):
        return f"CodonTable({self.codon_dict()}, {self.start_codons()})"

    def __eq__(self, item):
        if not isinstance(item, CodonTable):
            return False
        return np.array_equal(self._aa_codes, item._aa_codes) and set(
            self._starts
        ) == set(item._starts)

    def __ne__(self, item):
        return not self == item

    def __getitem__(self, item):
        if isinstance(item, str):
            if len(item) == 1:
                aa_code = PROTEIN_ALPHABET.encode(item)
                return tuple(
                    CODON_ALPHABET.decode(code)
                    for code in np.flatnonzero(self._aa_codes == aa_code)
                )
            return PROTEIN_ALPHABET.decode(self._aa_codes[_encode_codon(item)])
        elif isinstance(item, Integral):
            codon_codes = np.flatnonzero(self._aa_codes == item)
            return tuple(tuple(bases) for bases in _to_bases(codon_codes).tolist())
        else:
            return self._aa_codes[_from_bases(item)].item()

    def map_codon_codes(self, codon_codes):
        """
        Translate an array of codons into amino acids.

        Parameters
        ----------
        codon_codes : ndarray, dtype=int, shape=(n,3)
            *n* codons, each given by the :data:`DNA_ALPHABET` symbol
            codes of its three nucleotides.

        Returns
        -------
        aa_codes : ndarray, dtype=int, shape=(n,)
            The :data:`PROTEIN_ALPHABET` symbol codes of the translated
            amino acids.

        Examples
        --------
        >>> codon_codes = DNA_ALPHABET.encode_multiple("ATGGTTTAA").reshape(-1, 3)
        >>> print(CodonTable.default_table().map_codon_codes(codon_codes))
        [10 17 23]
        """
        return self._aa_codes[_from_bases(codon_codes)]

    def translate_code(self, codon_code):
        """
        Translate a single codon.

        Parameters
        ----------
        codon_code : int
            The codon as symbol code in the :data:`CODON_ALPHABET`.

        Returns
        -------
        aa_code : int
            The symbol code of the amino acid in the
            :data:`PROTEIN_ALPHABET`.
        """
        return self._aa_codes[_check_codon_code(codon_code)].item()

    def is_stop_code(self, codon_code):
        """
        Whether the codon, given as :data:`CODON_ALPHABET` symbol code,
        is a stop codon in this table.
        """
        return self.translate_code(codon_code) == _STOP_CODE

    def is_start_code(self, codon_code):
        """
        Whether the codon, given as :data:`CODON_ALPHABET` symbol code,
        is a start codon in this table.
        """
        return _check_codon_code(codon_code) in self._starts

    def are_synonymous(self, codon_code1, codon_code2):
        """
        Whether two codons, given as :data:`CODON_ALPHABET` symbol
        codes, translate into the same amino acid.
        Any two stop codons are synonymous.
        """
        return self.translate_code(codon_code1) == self.translate_code(codon_code2)

    def is_four_fold_degenerated(self, codon_code):
        """
        Whether the third position of a codon is four-fold degenerated.

        This is the case, if the four codons that share the first two
        nucleotides with the given codon all translate into the same
        amino acid, which is not a stop.

        Parameters
        ----------
        codon_code : int
            The codon as symbol code in the :data:`CODON_ALPHABET`.

        Returns
        -------
        degenerated : bool
            True, if every substitution at the third position is
            synonymous.
        """
        # The four codons differing only in the third base are adjacent
        first = _check_codon_code(codon_code) // _N_BASES * _N_BASES
        family = self._aa_codes[first : first + _N_BASES]
        return bool(np.all(family == family[0]) and family[0] != _STOP_CODE)

    def codon_dict(self, code=False):
        """
        Get the translation of each codon as dictionary.

        Parameters
        ----------
        code : bool, optional
            If true, codons are given as tuples of nucleotide symbol
            codes and amino acids as symbol codes.
            Otherwise codons and amino acids are given as strings.

        Returns
        -------
        codon_dict : dict
            The amino acid for each of the 64 codons.
        """
        if code:
            return {
                tuple(bases): aa_code
                for bases, aa_code in zip(
                    _to_bases(np.arange(len(CODON_ALPHABET))).tolist(),
                    self._aa_codes.tolist(),
                )
            }
        return {
            codon: PROTEIN_ALPHABET.decode(aa_code)
            for codon, aa_code in zip(CODON_ALPHABET, self._aa_codes)
        }

    def is_start_codon(self, codon_codes):
        """
        Check for an array of codons, which of them are start codons.

        Parameters
        ----------
        codon_codes : ndarray, dtype=int, shape=(n,3)
            *n* codons, each given by the :data:`DNA_ALPHABET` symbol
            codes of its three nucleotides.

        Returns
        -------
        start : ndarray, dtype=bool, shape=(n,)
            True for each start codon.
        """
        return np.isin(_from_bases(codon_codes), self._starts)

    def start_codons(self, code=False):
        """
        Get the start codons.

        Parameters
        ----------
        code : bool, optional
            If true, the codons are given as tuples of nucleotide
            symbol codes instead of strings.

        Returns
        -------
        start_codons : tuple
            The start codons.
        """
        if code:
            return tuple(tuple(bases) for bases in _to_bases(self._starts).tolist())
        return tuple(CODON_ALPHABET.decode(start) for start in self._starts)

    def stop_codons(self, code=False):
        """
        Get the stop codons.

        Parameters
        ----------
        code : bool, optional
            If true, the codons are given as :data:`CODON_ALPHABET`
            symbol codes instead of strings.

        Returns
        -------
        stop_codons : tuple
            The stop codons, in the order of the
            :data:`CODON_ALPHABET`.
        """
        stops = np.flatnonzero(self._aa_codes == _STOP_CODE).tolist()
        if code:
            return tuple(stops)
        return tuple(CODON_ALPHABET.decode(stop) for stop in stops)

    def with_start_codons(self, starts):
        """
        Create a table with the same translations but other start
        codons.

        Parameters
        ----------
        starts : iterable object of str
            The start codons of the new table.

        Returns
        -------
        new_table : CodonTable
            The modified table.
        """
        return CodonTable(self.codon_dict(), starts)

    def with_codon_mappings(self, codon_dict):
        """
        Create a table with the same start codons, where the
        translation of some codons is changed.

        Parameters
        ----------
        codon_dict : dict of (str -> str)
            The new amino acid for each changed codon.

        Returns
        -------
        new_table : CodonTable
            The modified table.
        """
        mappings = self.codon_dict()
        mappings.update(codon_dict)
        return CodonTable(mappings, self.start_codons())

    def __str__(self):
        entries = []
        for codon_code, codon in enumerate(CODON_ALPHABET):
            amino_acid = PROTEIN_ALPHABET.decode(self._aa_codes[codon_code])
            marker = "i" if codon_code in self._starts else " "
            entries.append(f"{codon} {amino_acid} {marker}")
        lines = []
        # One line per first two bases, one block per first base
        for first in range(0, len(entries), _N_BASES):
            if first > 0 and first % _N_BASES**2 == 0:
                lines.append("")
            lines.append("    ".join(entries[first : first + _N_BASES]).rstrip())
        return "\n".join(lines)

    @staticmethod
    def load(table_name):
        """
        Load a genetic code from the NCBI tables shipped with this
        package.

        Parameters
        ----------
        table_name : str or int
            Either one of the names of the table
            (e.g. ``"Vertebrate Mitochondrial"``) or its NCBI ID.

        Returns
        -------
        table : CodonTable
            The genetic code.

        Raises
        ------
        ValueError
            If no table has the given name or ID.

        See also
        --------
        table_names
        """
        for fields in _read_table_file(CodonTable._table_file):
            if isinstance(table_name, Integral):
                found = int(fields["id"]) == table_name
            else:
                found = table_name in _split_names(fields["name"])
            if found:
                codon_dict = {}
                starts = []
                for base1, base2, base3, amino_acid, init in zip(
                    fields["Base1"],
                    fields["Base2"],
                    fields["Base3"],
                    fields["AA"],
                    fields["Init"],
                ):
                    codon = base1 + base2 + base3
                    codon_dict[codon] = amino_acid
                    if init == "i":
                        starts.append(codon)
                return CodonTable(codon_dict, starts)
        raise ValueError(f"Codon table '{table_name}' was not found")

    @staticmethod
    def table_names():
        """
        Get all names accepted by :func:`load()`.

        Returns
        -------
        names : list of str
            The table names, including alternative names.
        """
        names = []
        for fields in _read_table_file(CodonTable._table_file):
            names.extend(_split_names(fields["name"]))
        return names

    @staticmethod
    def default_table():
        """
        Get the default genetic code.

        It is the NCBI *Standard* code, but with ``'ATG'`` as the only
        start codon.

        Returns
        -------
        table : CodonTable
            The default genetic code.
        """
        return _default_table


def _encode_codon(codon):
    if not isinstance(codon, str) or len(codon) != 3:
        raise ValueError(f"'{codon}' is not a valid codon")
    return CODON_ALPHABET.encode(codon)


def _check_codon_code(codon_code):
    if not isinstance(codon_code, Integral):
        raise TypeError(
            f"Codon code must be an integer, not {type(codon_code).__name__}"
        )
    if codon_code < 0 or codon_code >= len(CODON_ALPHABET):
        raise IndexOutOfRangeError(f"'{codon_code:d}' is not a valid codon code")
    return int(codon_code)


def _from_bases(bases):
    """
    Convert nucleotide codes with shape *(..., 3)* into codon codes.
    """
    bases = np.asarray(bases, dtype=int)
    if bases.shape[-1] != 3:
        raise ValueError(
            f"Codons must have length 3, "
            f"but the size of the last dimension is {bases.shape[-1]}"
        )
    return bases @ _PLACE_VALUES


def _to_bases(codon_codes):
    """
    Convert codon codes into nucleotide codes with shape *(..., 3)*.
    """
    codon_codes = np.asarray(codon_codes, dtype=int)
    return (codon_codes[..., np.newaxis] // _PLACE_VALUES) % _N_BASES


def _split_names(name_field):
    # Alternative names of a table are separated by ';'
    return [name.strip() for name in name_field.split(";")]


def _read_table_file(file_name):
    """
    Parse the tables of a file in the NCBI genetic code format into a
    list of dictionaries, mapping field names to values.
    """
    with open(file_name, "r") as file:
        blocks = file.read().strip().split("\n\n")
    tables = []
    for block in blocks:
        fields = {}
        for line in block.splitlines():
            key, value = line.split(maxsplit=1)
            fields[key] = value.strip()
        tables.append(fields)
    return tables


_default_table = CodonTable.load("Standard").with_start_codons(["ATG"])
