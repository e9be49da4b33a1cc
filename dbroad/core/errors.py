"""
Error and warning types raised by dbroad.
"""

import inspect
import os


class InvalidParameterError(ValueError):
    """
    Raised when a broadening model is built from unphysical parameters.

    Subclasses ValueError so callers validating plain numbers can keep
    catching ValueError.
    """


class DomainWarning(UserWarning):
    """
    Issued when a broadening function is evaluated outside 0-180 degrees.

    The formulas are defined for any angle, but only the polar range maps to
    a physical detector position, so evaluation proceeds after the warning.
    NaN angles are reported the same way.
    """


def find_stack_level() -> int:
    """
    Stack level of the first frame outside the dbroad package.

    Pass the result as ``stacklevel`` to ``warnings.warn`` so the warning
    points at user code however deep inside dbroad it was issued.
    """
    import dbroad

    pkg_dir = os.path.dirname(os.path.abspath(dbroad.__file__)) + os.sep

    frame = inspect.currentframe()
    try:
        n = 0
        while frame:
            if os.path.abspath(inspect.getfile(frame)).startswith(pkg_dir):
                frame = frame.f_back
                n += 1
            else:
                break
    finally:
        del frame
    return n
