#!/usr/bin/env python3
#
#   Orbit decomposition of dense image arrays
#

from typing import List, Sequence, Tuple

import numpy as np

# dtype of every dense image array in the library
IMAGE_DTYPE = np.int64

def as_image(seq : Sequence[int]) -> np.ndarray:
    image = np.asarray(seq)
    # an empty list comes back as float64, nothing to convert there
    if image.size != 0 and not np.issubdtype(image.dtype, np.integer):
        raise TypeError(f"image entries must be integers, got {image.dtype}")
    if image.ndim != 1:
        raise ValueError(f"image must be one-dimensional, got shape {image.shape}")
    return image.astype(IMAGE_DTYPE, copy=False)

def is_bijection(image : np.ndarray) -> bool:
    """
    True if image is a permutation of range(len(image))
    """
    return bool(np.array_equal(np.sort(image), np.arange(len(image), dtype=IMAGE_DTYPE)))

def moved_points(image : np.ndarray) -> np.ndarray:
    """
    Indices i with image[i] != i, ascending
    """
    return np.flatnonzero(image != np.arange(len(image), dtype=IMAGE_DTYPE))

def last_moved(image : np.ndarray) -> int:
    """
    Largest index that is not a fixed point, -1 if there is none
    """
    moved = moved_points(image)
    if len(moved) == 0:
        return -1
    return int(moved[-1])

def disjoint_orbits(image : np.ndarray) -> List[Tuple[int, ...]]:
    """
    Recover the disjoint non-trivial cycles of a dense image array.

    Each orbit is traced from its smallest unvisited element by following image[] until it returns to the start.
    Fixed points are never traced. Since orbits are started in ascending order, every tuple begins with its minimal
    element and the list comes out sorted by minimal element.
    """
    visited = np.zeros(len(image), dtype=bool)
    orbits = []

    for e0 in moved_points(image).tolist():
        if visited[e0]:
            continue
        visited[e0] = True
        orbit = [e0]
        e = int(image[e0])
        while e != e0:
            assert not visited[e], "image is not injective"
            visited[e] = True
            orbit.append(e)
            e = int(image[e])
        orbits.append(tuple(orbit))

    return orbits

def cycle_type(image : np.ndarray) -> Tuple[int, ...]:
    """
    Lengths of the non-trivial cycles, longest first
    """
    return tuple(sorted((len(orbit) for orbit in disjoint_orbits(image)), reverse=True))

########################################################################################################################
#   Unit Tests
########################################################################################################################

import random
import unittest

def _image_of_cycles(n, cycles):
    image = list(range(n))
    for cyc in cycles:
        for i,e in enumerate(cyc):
            image[e] = cyc[(i + 1) % len(cyc)]
    return as_image(image)

class TestOrbits(unittest.TestCase):

    def test_disjoint_orbits(self):
        image = _image_of_cycles(11, [(10, 3, 1), (6, 4, 5)])
        self.assertEqual(disjoint_orbits(image), [(1, 10, 3), (4, 5, 6)])
        self.assertEqual(disjoint_orbits(as_image([0, 1, 2])), [])
        self.assertEqual(disjoint_orbits(as_image([])), [])
        self.assertEqual(disjoint_orbits(as_image([1, 0])), [(0, 1)])

    def test_moved_points(self):
        image = _image_of_cycles(11, [(1, 10, 3), (4, 5, 6)])
        self.assertEqual(moved_points(image).tolist(), [1, 3, 4, 5, 6, 10])
        self.assertEqual(last_moved(image), 10)
        self.assertEqual(last_moved(as_image(range(5))), -1)
        self.assertEqual(last_moved(as_image([])), -1)

    def test_is_bijection(self):
        self.assertTrue(is_bijection(as_image([1, 0, 2])))
        self.assertTrue(is_bijection(as_image([])))
        self.assertFalse(is_bijection(as_image([1, 1, 2])))
        self.assertFalse(is_bijection(as_image([0, 3])))

    def test_as_image(self):
        self.assertEqual(as_image((2, 0, 1)).dtype, IMAGE_DTYPE)
        with self.assertRaises(ValueError):
            as_image([[0, 1], [1, 0]])
        self.assertRaises(TypeError, as_image, [1.7, 0.2])
        self.assertRaises(TypeError, as_image, [True, False])
        self.assertEqual(as_image([]).dtype, IMAGE_DTYPE)
        self.assertEqual(as_image(np.array([1, 0], dtype=np.uint8)).tolist(), [1, 0])

    def test_cycle_type(self):
        image = _image_of_cycles(12, [(0, 1), (2, 3, 4, 5), (7, 8, 9)])
        self.assertEqual(cycle_type(image), (4, 3, 2))
        self.assertEqual(cycle_type(as_image(range(4))), ())

    def test_orbits_partition_moved_points(self):
        for _ in range(200):
            n = random.randint(0, 40)
            images = list(range(n))
            random.shuffle(images)
            image = as_image(images)

            orbits = disjoint_orbits(image)
            seen = set()
            for orbit in orbits:
                self.assertGreater(len(orbit), 1)
                self.assertEqual(orbit[0], min(orbit))
                self.assertTrue(seen.isdisjoint(orbit))
                seen.update(orbit)
                # consecutive elements are linked by the map
                for i,e in enumerate(orbit):
                    self.assertEqual(image[e], orbit[(i + 1) % len(orbit)])
            self.assertEqual(seen, set(moved_points(image).tolist()))
            self.assertEqual([o[0] for o in orbits], sorted(o[0] for o in orbits))
