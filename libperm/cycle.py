#!/usr/bin/env python3
#
#   Cycles and the permutable protocol
#

import functools
from typing import List, Protocol, Set, Tuple, runtime_checkable

import numpy as np

from libperm.orbits import IMAGE_DTYPE

_ELEMENT_MAX = int(np.iinfo(IMAGE_DTYPE).max)

class DuplicateElementError(ValueError):
    """
    A cycle was given the same element twice
    """

    def __init__(self, elements, duplicate):
        super().__init__(f"element {duplicate} appears more than once in {tuple(elements)}")
        self.elements = tuple(elements)
        self.duplicate = duplicate

def as_element(e) -> int:
    """
    Validates a domain element, the domain being the non-negative integers
    """
    if isinstance(e, bool) or not isinstance(e, (int, np.integer)):
        raise TypeError(f"permutation elements are integers, got {type(e).__name__}")
    if e < 0:
        raise ValueError(f"permutation elements are non-negative, got {e}")
    if e > _ELEMENT_MAX:
        raise ValueError(f"permutation elements must fit in {np.dtype(IMAGE_DTYPE).name}, got {e}")
    return int(e)

@runtime_checkable
class Permutable(Protocol):
    """
    Anything acting on the non-negative integers that moves only finitely many of them.
    Cycle and Permutation are the two implementations.
    """

    def permute(self, e : int) -> int: ...

    def orbit(self) -> Set[int]: ...

    def inverse(self) -> "Permutable": ...

    def transpositions(self) -> List["Cycle"]: ...

    def images(self, n : int) -> np.ndarray: ...

def same_action(a : Permutable, b : Permutable) -> bool:
    # outside both orbits both are the identity
    return all(a.permute(e) == b.permute(e) for e in a.orbit() | b.orbit())

@functools.total_ordering
class Cycle:
    """
    Maps each element to the one following it, the last one back to the first, and fixes everything else.

    Cycle(1, 10, 3) and Cycle([1, 10, 3]) both send 1 -> 10 -> 3 -> 1.
    Cycles are immutable. == and ordering compare the canonical rotation, so Cycle(10, 3, 1) == Cycle(1, 10, 3).
    """

    def __init__(self, *elements):
        if len(elements) == 1 and not isinstance(elements[0], (int, np.integer)):
            elements = tuple(elements[0])
        if len(elements) == 0:
            raise ValueError("a cycle needs at least one element")

        self.elements = tuple(as_element(e) for e in elements)

        k = len(self.elements)
        self.succ = {}
        for i,e in enumerate(self.elements):
            if e in self.succ:
                raise DuplicateElementError(self.elements, e)
            self.succ[e] = self.elements[(i + 1) % k]

        self.canonical = self.canonical_order()

    def __len__(self):
        return len(self.elements)

    def __iter__(self):
        return iter(self.elements)

    def permute(self, e : int) -> int:
        e = as_element(e)
        return self.succ.get(e, e)

    def __call__(self, e : int) -> int:
        return self.permute(e)

    def orbit(self) -> Set[int]:
        return set(self.elements)

    def is_identity(self) -> bool:
        return len(self.elements) == 1

    def is_transposition(self) -> bool:
        return len(self.elements) == 2

    def order(self) -> int:
        return len(self.elements)

    def inverse(self) -> "Cycle":
        return Cycle(reversed(self.elements))

    def __invert__(self):
        return self.inverse()

    def canonical_order(self) -> Tuple[int, ...]:
        """
        The elements rotated so that the smallest comes first
        """
        first = min(self.elements)
        seq = [first]
        e = self.permute(first)
        while e != first:
            seq.append(e)
            e = self.permute(e)
        return tuple(seq)

    def transpositions(self) -> List["Cycle"]:
        """
        (c0 c1 ... ck-1) = (c0 ck-1)(c0 ck-2)...(c0 c1)

        Read as a product, the rightmost transposition acts first. Folding the returned list left to right with
        Permutation.add gives back this cycle. The identity cycle has no transpositions.
        """
        c = self.canonical
        return [Cycle(c[0], e) for e in reversed(c[1:])]

    def images(self, n : int) -> np.ndarray:
        """
        [permute(i) for i in range(n)] as an array
        """
        out = np.arange(n, dtype=IMAGE_DTYPE)
        src = np.array(self.elements, dtype=IMAGE_DTYPE)
        dst = np.roll(src, -1)
        inside = src < n
        out[src[inside]] = dst[inside]
        return out

    def intersects(self, other : Permutable) -> bool:
        return not self.orbit().isdisjoint(other.orbit())

    def equals(self, other : Permutable) -> bool:
        """
        Same action on every element. Unlike ==, any two 1-cycles are equal here since both are the identity.
        """
        return same_action(self, other)

    def __eq__(self, other):
        if isinstance(other, Cycle):
            return self.canonical == other.canonical
        return NotImplemented

    def __lt__(self, other):
        if isinstance(other, Cycle):
            return self.canonical < other.canonical
        return NotImplemented

    def __hash__(self):
        return hash(self.canonical)

    def __str__(self):
        return "(" + " ".join(str(e) for e in self.canonical) + ")"

    def __repr__(self):
        return f"Cycle({', '.join(str(e) for e in self.elements)})"

########################################################################################################################
#   Unit Tests
########################################################################################################################

import random
import unittest

class TestCycle(unittest.TestCase):

    def test_init(self):
        self.assertEqual(Cycle(1, 2, 3).elements, (1, 2, 3))
        self.assertEqual(Cycle([4, 5]).elements, (4, 5))
        self.assertEqual(Cycle(range(3)).elements, (0, 1, 2))
        self.assertEqual(Cycle(7).elements, (7,))
        self.assertEqual(Cycle(np.int64(3), 4).elements, (3, 4))

    def test_init_errors(self):
        with self.assertRaises(DuplicateElementError) as ctx:
            Cycle(1, 2, 1)
        self.assertEqual(ctx.exception.duplicate, 1)
        self.assertEqual(ctx.exception.elements, (1, 2, 1))
        # still a ValueError for callers that do not care
        self.assertRaises(ValueError, Cycle, 3, 3)
        self.assertRaises(ValueError, Cycle)
        self.assertRaises(ValueError, Cycle, [])
        self.assertRaises(ValueError, Cycle, 1, -2)
        self.assertRaises(TypeError, Cycle, 1, 2.5)
        self.assertRaises(TypeError, Cycle, "12")
        self.assertRaises(ValueError, Cycle, 2 ** 63, 1)
        self.assertEqual(Cycle(2 ** 63 - 1, 1).elements, (2 ** 63 - 1, 1))

    def test_permute(self):
        c = Cycle(1, 10, 3)
        self.assertEqual(c.permute(1), 10)
        self.assertEqual(c.permute(10), 3)
        self.assertEqual(c.permute(3), 1)
        self.assertEqual(c.permute(7), 7)
        self.assertEqual(c.permute(0), 0)
        self.assertEqual(c(10), 3)
        self.assertEqual(Cycle(4).permute(4), 4)
        self.assertRaises(ValueError, c, -1)
        self.assertRaises(ValueError, c.permute, -1)
        self.assertRaises(TypeError, c.permute, 1.0)

    def test_orbit(self):
        self.assertEqual(Cycle(1, 10, 3).orbit(), {1, 3, 10})
        self.assertEqual(Cycle(4).orbit(), {4})

    def test_classification(self):
        self.assertTrue(Cycle(4).is_identity())
        self.assertFalse(Cycle(4).is_transposition())
        self.assertTrue(Cycle(4, 2).is_transposition())
        self.assertFalse(Cycle(4, 2).is_identity())
        self.assertFalse(Cycle(1, 2, 3).is_transposition())
        self.assertEqual(Cycle(1, 2, 3).order(), 3)
        self.assertEqual(len(Cycle(1, 2, 3, 4)), 4)

    def test_inverse(self):
        c = Cycle(1, 10, 3)
        self.assertEqual(c.inverse().elements, (3, 10, 1))
        self.assertEqual(~c, Cycle(1, 3, 10))
        for e in c:
            self.assertEqual(c.inverse().permute(c.permute(e)), e)
        self.assertEqual(Cycle(5).inverse(), Cycle(5))

    def test_canonical_order(self):
        self.assertEqual(Cycle(10, 3, 1).canonical_order(), (1, 10, 3))
        self.assertEqual(Cycle(1, 10, 3).canonical_order(), (1, 10, 3))
        self.assertEqual(Cycle(6, 4, 5).canonical_order(), (4, 5, 6))
        self.assertEqual(str(Cycle(10, 3, 1)), "(1 10 3)")
        self.assertEqual(str(Cycle(8)), "(8)")
        self.assertEqual(repr(Cycle(10, 3, 1)), "Cycle(10, 3, 1)")

    def test_transpositions(self):
        self.assertEqual(Cycle(1, 10, 3).transpositions(), [Cycle(1, 3), Cycle(1, 10)])
        self.assertEqual(Cycle(3, 1, 10).transpositions(), [Cycle(1, 3), Cycle(1, 10)])
        self.assertEqual(Cycle(7, 2).transpositions(), [Cycle(2, 7)])
        self.assertEqual(Cycle(5).transpositions(), [])
        self.assertTrue(all(t.is_transposition() for t in Cycle(range(9)).transpositions()))

    def test_transpositions_reproduce_cycle(self):
        for _ in range(200):
            elements = random.sample(range(50), random.randint(2, 12))
            c = Cycle(elements)
            ts = c.transpositions()
            self.assertEqual(len(ts), len(c) - 1)
            for e in list(c.orbit()) + [50, 51]:
                # rightmost transposition acts first
                x = e
                for t in reversed(ts):
                    x = t.permute(x)
                self.assertEqual(x, c.permute(e))

    def test_images(self):
        self.assertEqual(Cycle(1, 3).images(5).tolist(), [0, 3, 2, 1, 4])
        self.assertEqual(Cycle(2, 0, 1).images(3).tolist(), [1, 2, 0])
        self.assertEqual(Cycle(5).images(6).tolist(), [0, 1, 2, 3, 4, 5])
        self.assertEqual(Cycle(1, 3).images(0).tolist(), [])

    def test_ordering_and_hashing(self):
        self.assertEqual(Cycle(3, 1, 2), Cycle(1, 2, 3))
        self.assertNotEqual(Cycle(1, 2, 3), Cycle(1, 3, 2))
        self.assertEqual(hash(Cycle(3, 1, 2)), hash(Cycle(2, 3, 1)))
        self.assertEqual(len({Cycle(1, 2), Cycle(2, 1), Cycle(4, 5)}), 2)
        self.assertEqual(sorted([Cycle(5, 4), Cycle(3, 1)]), [Cycle(1, 3), Cycle(4, 5)])
        self.assertLess(Cycle(2, 0), Cycle(1, 3))

    def test_equals(self):
        self.assertTrue(Cycle(5).equals(Cycle(7)))
        self.assertNotEqual(Cycle(5), Cycle(7))
        self.assertTrue(Cycle(1, 2).equals(Cycle(2, 1)))
        self.assertFalse(Cycle(1, 2, 3).equals(Cycle(1, 3, 2)))
        self.assertFalse(Cycle(1, 2).equals(Cycle(1, 3)))

    def test_intersects(self):
        self.assertTrue(Cycle(1, 2, 3).intersects(Cycle(3, 4)))
        self.assertFalse(Cycle(1, 2, 3).intersects(Cycle(4, 5)))

    def test_protocol(self):
        self.assertIsInstance(Cycle(1, 2), Permutable)
        self.assertNotIsInstance("(1 2)", Permutable)
