# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
Containers for the sites of an alignment.
"""

__name__ = "siteseq"
__author__ = "The siteseq developers"
__all__ = ["SiteContainer", "VectorSiteContainer", "CompressedSiteContainer"]

import abc
import warnings
from numbers import Integral
import numpy as np
from .copyable import Copyable
from .error import (
    AlphabetMismatchError,
    DimensionMismatchError,
    IndexOutOfRangeError,
    StaleCompressionWarning,
)
from .site import AbstractSite


class SiteContainer(Copyable, metaclass=abc.ABCMeta):
    """
    The abstract base class for containers storing the sites of an
    alignment.

    A site container stores an ordered list of sites, all with the same
    alphabet and the same number of sequences (rows).
    The alphabet is fixed on construction.
    The number of sequences is fixed either by the sequence names given
    on construction or by the first site added to the container.

    Sites are copied when they are added to a container and when they
    are returned from the container, so that the container content can
    only be modified via the container methods.

    All methods check their arguments before the container is modified,
    so that a failing call leaves the container unchanged.

    Parameters
    ----------
    alphabet : Alphabet
        The alphabet of all sites in this container.
    sites : iterable object of AbstractSite, optional
        The sites the container is initially filled with.
    names : iterable object of str, optional
        The names of the sequences.
        If given, the number of sequences is fixed to the number of
        names.
    """

    def __init__(self, alphabet, sites=(), names=None):
        self._alphabet = alphabet
        self._nb_sequences = None
        self._names = None
        if names is not None:
            self.set_sequence_names(names)
        for site in sites:
            self.add_site(site)

    def __copy_create__(self):
        return type(self)(self._alphabet)

    def __copy_fill__(self, clone):
        super().__copy_fill__(clone)
        clone._nb_sequences = self._nb_sequences
        clone._names = None if self._names is None else list(self._names)

    def get_alphabet(self):
        """
        Get the alphabet of the sites in this container.

        Returns
        -------
        alphabet : Alphabet
            The alphabet.
        """
        return self._alphabet

    def get_number_of_sites(self):
        """
        Get the number of sites, i.e. the number of logical alignment
        columns.

        Returns
        -------
        number : int
            The number of sites.
        """
        return len(self)

    def get_number_of_sequences(self):
        """
        Get the number of sequences.

        Returns
        -------
        number : int
            The number of sequences, 0 if it is not fixed yet.
        """
        return 0 if self._nb_sequences is None else self._nb_sequences

    def get_sequence_names(self):
        """
        Get the names of the sequences.

        Returns
        -------
        names : list of str or None
            The names, ``None`` if no names were set.
        """
        return None if self._names is None else list(self._names)

    def set_sequence_names(self, names):
        """
        Set the names of the sequences.

        If the number of sequences is not fixed yet, it is fixed to the
        number of names.

        Parameters
        ----------
        names : iterable object of str
            The names, one for each sequence.
        """
        names = list(names)
        if len(set(names)) != len(names):
            raise ValueError("Sequence names must be unique")
        if self._nb_sequences is not None and len(names) != self._nb_sequences:
            raise DimensionMismatchError(
                f"Expected {self._nb_sequences} names, got {len(names)}"
            )
        self._names = names
        self._nb_sequences = len(names)

    def get_sequence_index(self, name):
        """
        Get the row index of the sequence with the given name.

        Parameters
        ----------
        name : str
            The sequence name.

        Returns
        -------
        index : int
            The row index.

        Raises
        ------
        KeyError
            If there is no sequence with the given name.
        """
        if self._names is None or name not in self._names:
            raise KeyError(f"No sequence with name '{name}'")
        return self._names.index(name)

    def add_site(self, site):
        """
        Append a site to the end of the container.

        Parameters
        ----------
        site : AbstractSite
            The site to be added.

        Raises
        ------
        AlphabetMismatchError
            If the alphabet of the site differs from the alphabet of the
            container.
        DimensionMismatchError
            If the number of sequences in the site differs from the
            number of sequences in the container.
        """
        self.insert_site(len(self), site)

    def insert_site(self, index, site):
        """
        Insert a site at the given index.

        The subsequent sites are shifted by one.

        Parameters
        ----------
        index : int
            The site index, at which the site is inserted.
            Must be in the range ``0 ... len(container)``.
        site : AbstractSite
            The site to be inserted.
        """
        self._check_index(index, len(self) + 1)
        self._check_site(site)
        self._insert(index, site)
        if self._nb_sequences is None:
            self._nb_sequences = len(site)

    def set_site(self, index, site):
        """
        Replace the site at the given index.

        Parameters
        ----------
        index : int
            The site index.
        site : AbstractSite
            The new site.
        """
        self._check_index(index, len(self))
        self._check_site(site)
        self._set(index, site)

    def remove_site(self, index):
        """
        Remove the site at the given index.

        Parameters
        ----------
        index : int
            The site index.

        Returns
        -------
        site : AbstractSite
            A copy of the removed site.
        """
        site = self.get_site(index)
        self._delete(index, 1)
        return site

    def delete_sites(self, index, length):
        """
        Remove multiple consecutive sites.

        Parameters
        ----------
        index : int
            The index of the first site to be removed.
        length : int
            The number of sites to be removed.
        """
        self._check_index(index, len(self) + 1)
        if length < 0 or index + length > len(self):
            raise IndexOutOfRangeError(
                f"Cannot delete {length} sites starting at index {index} "
                f"from a container with {len(self)} sites"
            )
        self._delete(index, length)

    def get_sequence(self, sequence):
        """
        Get the values of a sequence at all sites.

        The returned array is independent of the container:
        modifying it does not change the sites in the container.

        Parameters
        ----------
        sequence : int or str
            The row index or the name of the sequence.

        Returns
        -------
        values : ndarray
            The symbol code of the sequence at each site, or the
            probability vector at each site for probabilistic sites.
        """
        row = self._row_index(sequence)
        return np.array(
            [self._stored_site(i).get_value(row) for i in range(len(self))]
        )

    def get_value(self, sequence, site):
        """
        Get the value of a sequence at a site.

        Parameters
        ----------
        sequence : int or str
            The row index or the name of the sequence.
        site : int
            The site index.

        Returns
        -------
        value
            The symbol code or the probability vector.
        """
        row = self._row_index(sequence)
        self._check_index(site, len(self))
        return self._stored_site(site).get_value(row)

    def get_state_value(self, site, sequence, state):
        """
        Get the probability-like value, that a sequence has a certain
        state at a site.

        For sites with discrete states, the value is 1 if the state of
        the sequence is resolved in `state` and 0 otherwise.
        For probabilistic sites it is the stored probability.

        Parameters
        ----------
        site : int
            The site index.
        sequence : int or str
            The row index or the name of the sequence.
        state : int
            The state code.

        Returns
        -------
        value : float
            The value.
        """
        self._check_index(site, len(self))
        row = self._row_index(sequence)
        return self._stored_site(site).state_value(row, state)

    def remove_sequence(self, sequence):
        """
        Remove a sequence, i.e. a row, from all sites.

        Parameters
        ----------
        sequence : int or str
            The row index or the name of the sequence.
        """
        row = self._row_index(sequence)
        self._remove_row(row)
        if self._names is not None:
            del self._names[row]
        self._nb_sequences -= 1

    def clear(self):
        """
        Remove all sites and sequences, including the sequence names.
        """
        self._clear()
        self._nb_sequences = None
        self._names = None

    @abc.abstractmethod
    def get_site(self, index):
        """
        Get the site at the given index.

        Parameters
        ----------
        index : int
            The site index.

        Returns
        -------
        site : AbstractSite
            A copy of the site.
        """
        pass

    @abc.abstractmethod
    def get_site_positions(self):
        """
        Get the positions of all sites.

        Returns
        -------
        positions : list of int
            The position of each site.
        """
        pass

    @abc.abstractmethod
    def _stored_site(self, index):
        pass

    @abc.abstractmethod
    def _insert(self, index, site):
        pass

    @abc.abstractmethod
    def _set(self, index, site):
        pass

    @abc.abstractmethod
    def _delete(self, index, length):
        pass

    @abc.abstractmethod
    def _remove_row(self, row):
        pass

    @abc.abstractmethod
    def _clear(self):
        pass

    def _check_site(self, site):
        if not isinstance(site, AbstractSite):
            raise TypeError(f"Expected a site, not {type(site).__name__}")
        if site.get_alphabet() != self._alphabet:
            raise AlphabetMismatchError(
                "The alphabet of the site differs from the alphabet of the "
                "container"
            )
        if self._nb_sequences is not None and len(site) != self._nb_sequences:
            raise DimensionMismatchError(
                f"The site contains {len(site)} sequences, but the container "
                f"has {self._nb_sequences} sequences"
            )

    def _check_index(self, index, stop):
        if not isinstance(index, Integral):
            raise TypeError(f"Index must be an integer, not {type(index).__name__}")
        if index < 0 or index >= stop:
            raise IndexOutOfRangeError(
                f"Site index {index} is out of range for a container with "
                f"{len(self)} sites"
            )

    def _row_index(self, sequence):
        if isinstance(sequence, str):
            return self.get_sequence_index(sequence)
        if not isinstance(sequence, Integral):
            raise TypeError(
                f"Sequence must be given as index or name, "
                f"not {type(sequence).__name__}"
            )
        if sequence < 0 or sequence >= self.get_number_of_sequences():
            raise IndexOutOfRangeError(
                f"Sequence index {sequence} is out of range for a container "
                f"with {self.get_number_of_sequences()} sequences"
            )
        return sequence

    def __getitem__(self, index):
        return self.get_site(index)

    def __iter__(self):
        for i in range(len(self)):
            yield self.get_site(i)

    @abc.abstractmethod
    def __len__(self):
        pass


class VectorSiteContainer(SiteContainer):
    """
    A site container storing each site separately.

    The sites keep their position.

    Parameters
    ----------
    alphabet : Alphabet
        The alphabet of all sites in this container.
    sites : iterable object of AbstractSite, optional
        The sites the container is initially filled with.
    names : iterable object of str, optional
        The names of the sequences.

    Examples
    --------

    >>> container = VectorSiteContainer(DNA_ALPHABET, names=["x", "y"])
    >>> container.add_site(Site(DNA_ALPHABET, "AC", position=10))
    >>> container.add_site(Site(DNA_ALPHABET, "AG", position=11))
    >>> print(container.get_site_positions())
    [10, 11]
    >>> print(container.get_sequence("y"))
    [1 2]
    """

    def __init__(self, alphabet, sites=(), names=None):
        self._sites = []
        super().__init__(alphabet, sites, names)

    def __repr__(self):
        """Represent VectorSiteContainer as a string for debugging."""
        return (
            f"VectorSiteContainer({self._alphabet!r}, {self._sites!r}, "
            f"names={self._names!r})"
        )

    def __copy_fill__(self, clone):
        super().__copy_fill__(clone)
        clone._sites = [site.copy() for site in self._sites]

    def get_site(self, index):
        self._check_index(index, len(self))
        return self._sites[index].copy()

    def get_site_positions(self):
        return [site.position for site in self._sites]

    def _stored_site(self, index):
        return self._sites[index]

    def _insert(self, index, site):
        self._sites.insert(index, site.copy())

    def _set(self, index, site):
        self._sites[index] = site.copy()

    def _delete(self, index, length):
        del self._sites[index : index + length]

    def _remove_row(self, row):
        for site in self._sites:
            del site[row]

    def _clear(self):
        self._sites = []

    def __len__(self):
        return len(self._sites)


class CompressedSiteContainer(SiteContainer):
    """
    A site container, that stores identical sites only once.

    The container consists of a list of unique sites and an index,
    that maps each logical site to its unique site.
    Adding a site requires to look up, whether an identical site is
    already stored: in this case only the index of the stored site is
    added to the index.
    Accessing a site is as fast as in the :class:`VectorSiteContainer`.
    This reduces the memory usage considerably for alignments, where
    the number of sites is large compared to the number of sequences.

    Since positions are defined by the index in this container, the
    position of an added site is not stored.
    Instead, the position of a site is its index plus one.

    Removing a site only removes its entry from the index, the
    corresponding unique site is kept, even if it is not referenced
    anymore.
    Removing a sequence removes the row from all unique sites.
    Unique sites may become identical by this, but they are not merged:
    a :class:`StaleCompressionWarning` is issued in this case.

    Parameters
    ----------
    alphabet : Alphabet
        The alphabet of all sites in this container.
    sites : iterable object of AbstractSite, optional
        The sites the container is initially filled with.
    names : iterable object of str, optional
        The names of the sequences.

    Examples
    --------

    >>> container = CompressedSiteContainer(DNA_ALPHABET)
    >>> container.add_site(Site(DNA_ALPHABET, "ACG"))
    >>> container.add_site(Site(DNA_ALPHABET, "ATG"))
    >>> container.add_site(Site(DNA_ALPHABET, "ACG"))
    >>> print(container.get_number_of_sites())
    3
    >>> print(container.get_number_of_unique_sites())
    2
    >>> print(container.get_site(2))
    ACG
    """

    def __init__(self, alphabet, sites=(), names=None):
        self._unique_sites = []
        self._index = []
        # Maps the content of each unique site to its index in
        # '_unique_sites'
        self._lookup = {}
        super().__init__(alphabet, sites, names)

    def __repr__(self):
        """Represent CompressedSiteContainer as a string for debugging."""
        sites = [self._unique_sites[slot] for slot in self._index]
        return (
            f"CompressedSiteContainer({self._alphabet!r}, {sites!r}, "
            f"names={self._names!r})"
        )

    def __copy_fill__(self, clone):
        super().__copy_fill__(clone)
        clone._unique_sites = [site.copy() for site in self._unique_sites]
        clone._index = list(self._index)
        clone._lookup = dict(self._lookup)

    def get_number_of_unique_sites(self):
        """
        Get the number of stored unique sites.

        Returns
        -------
        number : int
            The number of unique sites, including sites that are not
            referenced by any logical site anymore.
        """
        return len(self._unique_sites)

    def get_site(self, index):
        self._check_index(index, len(self))
        site = self._unique_sites[self._index[index]].copy()
        site.position = index + 1
        return site

    def get_site_positions(self):
        return list(range(1, len(self) + 1))

    def _find_or_insert(self, site):
        """
        Get the index of the unique site with the same content as the
        given site.
        If no such site is stored yet, a copy of the site is stored.
        """
        key = site.content_key()
        slot = self._lookup.get(key)
        if slot is None:
            stored_site = site.copy()
            stored_site.position = 0
            self._unique_sites.append(stored_site)
            slot = len(self._unique_sites) - 1
            self._lookup[key] = slot
        return slot

    def _stored_site(self, index):
        return self._unique_sites[self._index[index]]

    def _insert(self, index, site):
        self._index.insert(index, self._find_or_insert(site))

    def _set(self, index, site):
        self._index[index] = self._find_or_insert(site)

    def _delete(self, index, length):
        del self._index[index : index + length]

    def _remove_row(self, row):
        for site in self._unique_sites:
            del site[row]
        self._lookup = {}
        nb_duplicates = 0
        for slot, site in enumerate(self._unique_sites):
            # The first of identical sites is used for subsequent lookups
            if self._lookup.setdefault(site.content_key(), slot) != slot:
                nb_duplicates += 1
        if nb_duplicates > 0:
            warnings.warn(
                f"{nb_duplicates} unique site(s) became identical to another "
                f"unique site after removing a sequence, they are not merged",
                StaleCompressionWarning,
            )

    def _clear(self):
        self._unique_sites = []
        self._index = []
        self._lookup = {}

    def __len__(self):
        return len(self._index)
