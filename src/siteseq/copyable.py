# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "siteseq"
__author__ = "The siteseq developers"
__all__ = ["Copyable"]

import abc


class Copyable(metaclass=abc.ABCMeta):
    """
    Base class for sites and site containers, that can be deep-copied.

    :meth:`copy()` creates a fresh instance via
    :meth:`__copy_create__()`, which only calls the constructor with the
    arguments that fix the identity of the object (e.g. the alphabet).
    Afterwards the content (symbol codes, stored sites, indices) is
    transferred via :meth:`__copy_fill__()`.
    Subclasses extend :meth:`__copy_fill__()` and call the ``super()``
    method first, so that each class in the hierarchy copies only its
    own attributes.
    """

    def copy(self):
        """
        Create a deep copy of this object.

        The copy does not share any mutable content with the original,
        hence modifying one of both does not affect the other.

        Returns
        -------
        copy
            A copy of this object.
        """
        clone = self.__copy_create__()
        self.__copy_fill__(clone)
        return clone

    def __copy_create__(self):
        """
        Instantiate an empty object of the same class.

        Must be overridden, if the constructor requires arguments.
        Do not call the ``super()`` method here.

        Returns
        -------
        copy
            A freshly instantiated, still empty, copy of *self*.
        """
        return type(self)()

    def __copy_fill__(self, clone):
        """
        Transfer the content of this object into `clone`.

        Always call the ``super()`` method as first statement.

        Parameters
        ----------
        clone
            The freshly instantiated copy of *self*.
        """
        pass
