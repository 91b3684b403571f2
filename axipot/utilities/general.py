"""
General utilities for AxiPot.
"""
from typing import Type, TypeVar

_T = TypeVar("_T")


def find_in_subclasses(base_class: Type[_T], class_name: str) -> Type[_T]:
    """
    Recursively search for a class by name among ``base_class`` and its descendants.

    Parameters
    ----------
    base_class : Type[_T]
        The class whose inheritance tree will be searched. ``base_class`` itself is a valid match.
    class_name : str
        The name of the class to search for.

    Returns
    -------
    Type[_T]
        The class with the specified name.

    Raises
    ------
    ValueError
        If no class with the specified name is found.

    Examples
    --------
    >>> class Base:
    ...     pass
    >>> class SubClass1(Base):
    ...     pass
    >>> class SubClass2(SubClass1):
    ...     pass
    >>> find_in_subclasses(Base, 'SubClass2').__name__
    'SubClass2'
    """
    if base_class.__name__ == class_name:
        return base_class

    for subclass in base_class.__subclasses__():
        try:
            return find_in_subclasses(subclass, class_name)
        except ValueError:
            continue

    raise ValueError(
        f"Failed to find subclass of {base_class.__name__} named {class_name}."
    )
