#
#   libperm : permutations of the non-negative integers, in cycle notation
#

from libperm.cycle import Cycle, DuplicateElementError, Permutable
from libperm.notation import IDENTITY_NOTATION, NotationParseError, format_permutation, parse, parse_cycles
from libperm.orbits import IMAGE_DTYPE
from libperm.permutation import Permutation, symmetric_group

__all__ = (
    "Cycle",
    "DuplicateElementError",
    "IDENTITY_NOTATION",
    "IMAGE_DTYPE",
    "NotationParseError",
    "Permutable",
    "Permutation",
    "format_permutation",
    "parse",
    "parse_cycles",
    "symmetric_group",
)
