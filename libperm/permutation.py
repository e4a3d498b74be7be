#!/usr/bin/env python3
#
#   Permutation implementation
#

import itertools
import logging
import math
from functools import reduce
from typing import Dict, Iterable, List, Set, Tuple

import numpy as np

from libperm.cycle import Cycle, Permutable, as_element, same_action
from libperm.orbits import IMAGE_DTYPE, as_image, cycle_type, disjoint_orbits, is_bijection, last_moved, moved_points

logger = logging.getLogger(__name__)

class Permutation:
    """
    Permutation of the non-negative integers stored as a dense image array.

    image[i] is where i goes for i < support, every element >= support is fixed. The support grows through resize()
    and shrinks through trim(), nowhere else.

    Composition: p.add(q) turns p into the product p q, q acting first. Cycle notation is read the same way, so
    "(1 2)(2 3)" applies (2 3) and then (1 2).
    """

    def __init__(self, p=None):
        if p is None: # empty, grows on demand
            self.image = np.arange(0, dtype=IMAGE_DTYPE)
        elif isinstance(p, (int, np.integer)) and not isinstance(p, bool): # identity of that support
            if p < 0:
                raise ValueError(f"support must be non-negative, got {p}")
            self.image = np.arange(p, dtype=IMAGE_DTYPE)
        elif isinstance(p, (list, np.ndarray)): # dense images
            image = as_image(p).copy()
            if not is_bijection(image):
                raise ValueError(f"{image.tolist()} is not a bijection of range({len(image)})")
            self.image = image
        elif isinstance(p, dict): # 1:1 mapping
            keys = [as_element(k) for k in p]
            values = [as_element(v) for v in p.values()]
            if set(keys) != set(values):
                raise ValueError(f"{p} does not map its keys onto themselves")
            self.image = np.arange(max(keys, default=-1) + 1, dtype=IMAGE_DTYPE)
            if keys:
                self.image[keys] = values
        elif isinstance(p, tuple): # cyclic
            self.image = np.arange(0, dtype=IMAGE_DTYPE)
            if len(p) != 0 and isinstance(p[0], tuple): # several cycles
                for t in p:
                    self.add(Cycle(t))
            elif len(p) != 0:
                self.add(Cycle(p))
        elif isinstance(p, str):
            self.image = Permutation.parse(p).image
        elif isinstance(p, (Cycle, Permutation)):
            self.image = np.arange(0, dtype=IMAGE_DTYPE)
            self.add(p)
        else:
            raise TypeError(f"cannot build a permutation from {type(p).__name__}")

    @classmethod
    def identity(cls, size : int = 0) -> "Permutation":
        return cls(size)

    @classmethod
    def from_cycles(cls, cycles : Iterable[Permutable]) -> "Permutation":
        """
        Product of the given permutables, the last one acting first
        """
        p = cls()
        for c in cycles:
            p.add(c)
        return p

    @classmethod
    def parse(cls, text : str) -> "Permutation":
        from libperm.notation import parse
        return parse(text)

    @property
    def support(self) -> int:
        return len(self.image)

    def __len__(self):
        return self.support

    def copy(self) -> "Permutation":
        p = Permutation()
        p.image = self.image.copy()
        return p

    def permute(self, e : int) -> int:
        e = as_element(e)
        if e < self.support:
            return int(self.image[e])
        return e

    def __call__(self, e : int) -> int:
        return self.permute(e)

    def __iter__(self):
        for k,v in enumerate(self.image.tolist()):
            yield k,v

    def images(self, n : int) -> np.ndarray:
        """
        [permute(i) for i in range(n)] as an array
        """
        out = np.arange(n, dtype=IMAGE_DTYPE)
        m = min(n, self.support)
        out[:m] = self.image[:m]
        return out

    def orbit(self) -> Set[int]:
        """
        Elements that are not fixed points
        """
        self.trim()
        return set(moved_points(self.image).tolist())

    def mapping(self) -> Dict[int, int]:
        return {e : int(self.image[e]) for e in moved_points(self.image).tolist()}

    def resize(self, n : int) -> "Permutation":
        """
        Grow the support to n, new elements are fixed points. Never shrinks.
        """
        if n > self.support:
            logger.debug("growing support %d -> %d", self.support, n)
            self.image = np.concatenate((self.image, np.arange(self.support, n, dtype=IMAGE_DTYPE)))
        return self

    def trim(self) -> "Permutation":
        """
        Drop the trailing run of fixed points from the support
        """
        n = last_moved(self.image) + 1
        if n < self.support:
            logger.debug("trimming support %d -> %d", self.support, n)
            self.image = self.image[:n].copy()
        return self

    def add(self, other) -> "Permutation":
        """
        Compose other into this permutation in place: afterwards self(e) == old_self(other(e)).

        other may be a Cycle or Permutation, a string in cycle notation, or an iterable of those which is then added
        one at a time from left to right.
        """
        if isinstance(other, str):
            from libperm.notation import parse_cycles
            other = parse_cycles(other)

        if isinstance(other, Permutable):
            orbit = other.orbit()
            if orbit:
                self.resize(max(orbit) + 1)
            self.image = self.image[other.images(self.support)]
            return self

        try:
            others = iter(other)
        except TypeError:
            raise TypeError(f"cannot compose a permutation with {type(other).__name__}") from None
        for q in others:
            self.add(q)
        return self

    def decompose(self) -> List[Cycle]:
        """
        Disjoint non-trivial cycles, sorted by their smallest element
        """
        return [Cycle(orbit) for orbit in disjoint_orbits(self.image)]

    def inverse(self) -> "Permutation":
        # disjoint cycles commute, so their inverses can go in any order
        result = Permutation.identity(self.support)
        for cyc in self.decompose():
            result.add(cyc.inverse())
        return result

    def transpositions(self) -> List[Cycle]:
        return [t for cyc in self.decompose() for t in cyc.transpositions()]

    def equals(self, other) -> bool:
        """
        Same action on every element, regardless of support or how either side was built.
        other may also be notation or an iterable of permutables, which is compared as their product.
        """
        if isinstance(other, str):
            other = Permutation.parse(other)
        elif not isinstance(other, Permutable):
            other = Permutation.from_cycles(other)
        return same_action(self, other)

    def __eq__(self, other):
        if isinstance(other, Permutable):
            return self.equals(other)
        return NotImplemented

    __hash__ = None # mutable

    def is_identity(self) -> bool:
        return len(self.orbit()) == 0

    def is_transposition(self) -> bool:
        return len(self.orbit()) == 2

    def is_cycle(self) -> bool:
        return self.cycle_count() == 1

    def cycle_count(self) -> int:
        return len(disjoint_orbits(self.image))

    def cycle_type(self) -> Tuple[int, ...]:
        return cycle_type(self.image)

    def order(self) -> int:
        """
        Smallest k > 0 with self ** k the identity
        """
        return reduce(math.lcm, self.cycle_type(), 1)

    def is_even(self) -> bool:
        """
        Determines if this permutation is even
        """
        acc = sum(length - 1 for length in self.cycle_type())
        return acc % 2 == 0

    def sign(self) -> int:
        return 1 if self.is_even() else -1

    def __mul__(self, other):
        if not isinstance(other, Permutable):
            return NotImplemented
        return self.copy().add(other)

    def __rmul__(self, other):
        if not isinstance(other, Permutable):
            return NotImplemented
        return Permutation(other).add(self)

    def __invert__(self):
        return self.inverse()

    def __pow__(self, k):
        if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
            return NotImplemented
        base = self.inverse() if k < 0 else self.copy()
        k = abs(int(k))
        result = Permutation.identity(self.support)
        # powers of one permutation commute, add order does not matter
        while k > 0:
            if k % 2 == 1:
                result.add(base)
            base = base * base
            k //= 2
        return result

    def __str__(self):
        from libperm.notation import format_permutation
        return format_permutation(self)

    def __repr__(self):
        return f"Permutation({self.image.tolist()})"

def symmetric_group(n : int) -> Tuple[Permutation, ...]:
    """
    All n! permutations of range(n), in lexicographic order of their images
    """
    return tuple(Permutation(list(e)) for e in itertools.permutations(range(n)))

########################################################################################################################
#   Unit Tests
########################################################################################################################

import random
import unittest

def random_permutation(n):
    images = list(range(n))
    random.shuffle(images)
    return Permutation(images)

class TestPermutation(unittest.TestCase):

    def test_identity(self):
        for n in (0, 1, 5, 40):
            p = Permutation.identity(n)
            self.assertEqual(p.support, n)
            self.assertEqual(p.orbit(), set())
            self.assertEqual(p.cycle_count(), 0)
            self.assertTrue(p.is_identity())
            self.assertFalse(p.is_cycle())
            self.assertEqual(p.decompose(), [])
            self.assertEqual(p.transpositions(), [])
        self.assertEqual(Permutation().support, 0)
        self.assertRaises(ValueError, Permutation.identity, -1)

    def test_init(self):
        p = Permutation([0, 3, 2, 1])
        self.assertEqual(p.permute(1), 3)
        self.assertEqual(p.permute(3), 1)
        self.assertEqual(p.permute(17), 17)

        self.assertTrue(Permutation({1 : 3, 3 : 1}).equals(Cycle(1, 3)))
        self.assertTrue(Permutation({}).is_identity())
        self.assertTrue(Permutation((1, 2, 3)).equals(Cycle(1, 2, 3)))
        self.assertTrue(Permutation(((1, 2), (3, 4))).equals("(1 2)(3 4)"))
        self.assertTrue(Permutation(()).is_identity())
        self.assertTrue(Permutation("(1 10 3)").equals(Cycle(1, 10, 3)))
        self.assertTrue(Permutation(Cycle(4, 5)).equals(Cycle(4, 5)))
        self.assertEqual(Permutation(np.array([1, 0])).image.tolist(), [1, 0])

        q = Permutation([1, 0])
        r = Permutation(q)
        r.add(Cycle(0, 1))
        self.assertEqual(q.image.tolist(), [1, 0])

    def test_init_errors(self):
        self.assertRaises(ValueError, Permutation, [1, 1, 0])
        self.assertRaises(ValueError, Permutation, [0, 5])
        self.assertRaises(ValueError, Permutation, {1 : 2})
        self.assertRaises(ValueError, Permutation, {1 : -1, -1 : 1})
        self.assertRaises(TypeError, Permutation, 1.5)
        self.assertRaises(TypeError, Permutation, {1, 2})
        self.assertRaises(TypeError, Permutation, [1.7, 0.2])
        self.assertRaises(TypeError, Permutation, [1.0, 0.0])
        self.assertRaises(TypeError, Permutation, [True, False])
        self.assertRaises(TypeError, Permutation, np.array([1.0, 0.0]))
        self.assertRaises(TypeError, Permutation, ["1", "0"])

    def test_permute(self):
        p = Permutation.parse("(1 10 3)(4 5 6)")
        self.assertEqual(p.permute(1), 10)
        self.assertEqual(p.permute(10), 3)
        self.assertEqual(p.permute(6), 4)
        self.assertEqual(p.permute(0), 0)
        self.assertEqual(p.permute(1000), 1000)
        self.assertEqual(p(3), 1)
        self.assertRaises(TypeError, p, "3")
        self.assertRaises(ValueError, p, -3)
        # negative elements are rejected, not read from the end of the image
        self.assertRaises(ValueError, p.permute, -1)
        self.assertRaises(ValueError, Cycle(1, 10, 3).permute, -1)
        self.assertRaises(ValueError, p.permute, 2 ** 63)

    def test_resize_trim(self):
        p = Permutation.identity(10)
        p.add(Cycle(2, 3))
        self.assertEqual(p.support, 10)
        p.trim()
        self.assertEqual(p.support, 4)
        p.resize(2)
        self.assertEqual(p.support, 4)
        p.resize(8)
        self.assertEqual(p.support, 8)
        self.assertEqual(p.image.tolist(), [0, 1, 3, 2, 4, 5, 6, 7])
        self.assertEqual(Permutation.identity(5).trim().support, 0)
        self.assertEqual(p.orbit(), {2, 3})
        self.assertEqual(p.support, 4)

    def test_add_grows_support(self):
        p = Permutation()
        p.add(Cycle(7, 1, 3))
        self.assertEqual(p.support, 8)
        p.add(Cycle(9))
        self.assertEqual(p.support, 10)
        p.add(Permutation.identity(30))
        self.assertEqual(p.support, 10)
        self.assertTrue(p.equals(Cycle(7, 1, 3)))

    def test_add_composition_order(self):
        p = Permutation((1, 2, 3))
        p.add("(4 2 5)")
        self.assertTrue(p.equals("(1 2 5 4 3)"))
        p.add(Permutation.parse("(2 1)(1 2)"))
        self.assertTrue(p.equals("(1 2 5 4 3)"))

        p = Permutation.parse("(1 10 3)(4 5 6)")
        self.assertEqual(len(p.orbit()), 6)
        p.add("(10 3)")
        self.assertTrue(p.equals("(1 10)(4 5 6)"))
        self.assertEqual(len(p.orbit()), 5)

        p = Permutation((1, 2, 3))
        p.add(p.inverse())
        self.assertTrue(p.is_identity())

        # the added permutation acts first
        p = Permutation.parse("(1 2)")
        p.add(Cycle(2, 3))
        self.assertEqual(p.permute(1), 2)
        self.assertEqual(p.permute(2), 3)
        self.assertEqual(p.permute(3), 1)

    def test_add_iterable(self):
        p = Permutation()
        p.add([Cycle(1, 3), Cycle(1, 10), Cycle(4, 6), Cycle(4, 5)])
        self.assertTrue(p.equals("(1 10 3)(4 5 6)"))
        self.assertRaises(TypeError, Permutation().add, 3)

    def test_add_self(self):
        p = Permutation.parse("(0 1 2 3)")
        p.add(p)
        self.assertTrue(p.equals("(0 2)(1 3)"))

    def test_scenario_add(self):
        p = Permutation.parse("(1 10 3)(4 5 6)").add(Permutation.parse("(7 1 3)"))
        self.assertTrue(p.equals(Permutation.parse("(3 7 10)(4 5 6)")))
        self.assertEqual(str(p), "(3 7 10)(4 5 6)")

    def test_scenario_overlapping_cycles(self):
        p = Permutation.parse("(1 10 3)(4 5 6)(1 4 6 2)")
        self.assertTrue(p.equals(Permutation.parse("(1 5 6 2 10 3)")))
        self.assertEqual(p.decompose(), [Cycle(1, 5, 6, 2, 10, 3)])
        self.assertTrue(p.is_cycle())

    def test_scenario_transpositions(self):
        p = Permutation.parse("(1 3)(1 10)(4 6)(4 5)")
        self.assertEqual(p.decompose(), [Cycle(1, 10, 3), Cycle(4, 5, 6)])
        self.assertEqual(set(p.transpositions()), {Cycle(1, 3), Cycle(1, 10), Cycle(4, 6), Cycle(4, 5)})
        self.assertEqual(len(p.transpositions()), 4)
        self.assertTrue(p.equals(p.transpositions()))
        self.assertTrue(p.equals("".join(str(t) for t in p.transpositions())))

    def test_scenario_transposition(self):
        p = Permutation.parse("(1 2)")
        self.assertTrue(p.is_transposition())
        self.assertTrue(p.is_cycle())
        self.assertTrue(p.inverse().equals(p))
        self.assertFalse(Permutation.parse("(1 2 3)").is_transposition())
        self.assertFalse(Permutation.parse("(1 2)(3 4)").is_cycle())
        self.assertEqual(Permutation.parse("(1 2)(3 4)").cycle_count(), 2)

    def test_decompose(self):
        p = Permutation([2, 0, 1, 3, 5, 4])
        self.assertEqual(p.decompose(), [Cycle(0, 2, 1), Cycle(4, 5)])
        for _ in range(100):
            p = random_permutation(random.randint(0, 40))
            cycles = p.decompose()
            seen = set()
            for cyc in cycles:
                self.assertFalse(cyc.is_identity())
                self.assertTrue(seen.isdisjoint(cyc.orbit()))
                seen |= cyc.orbit()
            self.assertEqual(seen, p.orbit())
            self.assertTrue(Permutation.from_cycles(cycles).equals(p))

    def test_inverse(self):
        p = Permutation.parse("(1 10 3)(4 5 6)")
        self.assertTrue(p.inverse().equals("(1 3 10)(4 6 5)"))
        self.assertTrue((~p).equals(p.inverse()))
        self.assertEqual(p.inverse().support, p.support)
        for _ in range(200):
            p = random_permutation(random.randint(0, 30))
            q = p.copy()
            q.add(p.inverse())
            self.assertTrue(q.equals(Permutation.identity(random.randint(0, 50))))
            q = p.inverse()
            q.add(p)
            self.assertTrue(q.is_identity())

    def test_transpositions(self):
        for _ in range(100):
            p = random_permutation(random.randint(0, 20))
            ts = p.transpositions()
            self.assertTrue(all(t.is_transposition() for t in ts))
            self.assertTrue(Permutation.from_cycles(ts).equals(p))
            self.assertEqual(len(ts) % 2 == 0, p.is_even())

    def test_equals(self):
        p = Permutation.parse("(1 2)")
        q = Permutation.parse("(2 1)").resize(50)
        self.assertEqual(q.support, 50)
        self.assertTrue(p.equals(q))
        self.assertEqual(p, q)
        self.assertEqual(p, Cycle(1, 2))
        self.assertEqual(Cycle(2, 1), p)
        self.assertNotEqual(p, Permutation.parse("(1 3)"))
        self.assertNotEqual(p, "(1 2)")
        self.assertTrue(Permutation.identity(0).equals(Permutation.identity(100)))
        self.assertTrue(Permutation.identity(3).equals(Cycle(8)))
        self.assertTrue(p.equals("(1 2)"))
        self.assertFalse(p.equals([Cycle(1, 2), Cycle(1, 2)]))
        self.assertRaises(TypeError, hash, p)

    def test_invariants(self):
        p = Permutation.parse("(1 2 3)(4 5)")
        self.assertEqual(p.cycle_type(), (3, 2))
        self.assertEqual(p.order(), 6)
        self.assertFalse(p.is_even())
        self.assertEqual(p.sign(), -1)
        self.assertEqual(Permutation.parse("(1 2 3)").sign(), 1)
        self.assertEqual(Permutation.identity(4).order(), 1)
        self.assertEqual(p.mapping(), {1 : 2, 2 : 3, 3 : 1, 4 : 5, 5 : 4})

    def test_operators(self):
        p = Permutation.parse("(1 2)")
        q = p * Cycle(2, 3)
        self.assertTrue(q.equals("(1 2 3)"))
        self.assertTrue(p.equals("(1 2)"))
        self.assertTrue((Cycle(2, 3) * p).equals("(1 3 2)"))
        self.assertTrue((p * p).is_identity())

        r = Permutation.parse("(1 2 3)")
        self.assertTrue((r ** 0).is_identity())
        self.assertTrue((r ** 1).equals(r))
        self.assertTrue((r ** 2).equals("(1 3 2)"))
        self.assertTrue((r ** 3).is_identity())
        self.assertTrue((r ** -1).equals(r.inverse()))
        self.assertTrue((r ** 7).equals(r))
        for _ in range(50):
            s = random_permutation(random.randint(1, 15))
            self.assertTrue((s ** s.order()).is_identity())

    def test_iter_repr(self):
        p = Permutation([1, 0, 2])
        self.assertEqual(list(p), [(0, 1), (1, 0), (2, 2)])
        self.assertEqual(len(p), 3)
        self.assertEqual(repr(p), "Permutation([1, 0, 2])")

    def test_symmetric_group(self):
        S3 = symmetric_group(3)
        self.assertEqual(len(S3), 6)
        self.assertTrue(S3[0].is_identity())
        self.assertEqual(len(set(str(p) for p in S3)), 6)
        self.assertEqual(sum(1 for p in S3 if p.is_even()), 3)
        self.assertEqual(len(symmetric_group(4)), 24)
        self.assertEqual(len(symmetric_group(0)), 1)
