#!/usr/bin/env python3
#
#   Cycle notation, e.g. "(1 10 3)(4 5 6)"
#

import logging
import re
from typing import List

from libperm.cycle import Cycle, DuplicateElementError, Permutable
from libperm.permutation import Permutation

logger = logging.getLogger(__name__)

# What the identity renders as, and parses back from
IDENTITY_NOTATION = ""

_CYCLE_TOKEN = re.compile(r"\(([^()]*)\)")
_UINT = re.compile(r"[0-9]+")

class NotationParseError(ValueError):
    """
    Malformed cycle notation. token is the offending part of text.
    """

    def __init__(self, text, token, reason):
        super().__init__(f"{reason}: {token!r} in {text!r}")
        self.text = text
        self.token = token
        self.reason = reason

def _check_gap(text, start, end):
    # only whitespace may sit between cycle tokens
    gap = text[start:end].strip()
    if not gap:
        return
    if "(" in gap or ")" in gap:
        raise NotationParseError(text, gap, "unbalanced parentheses")
    raise NotationParseError(text, gap, "text outside of a cycle")

def _parse_token(text, match) -> Cycle:
    token = match.group(0)
    entries = match.group(1).split()
    if len(entries) == 0:
        raise NotationParseError(text, token, "empty cycle")
    for entry in entries:
        if not _UINT.fullmatch(entry):
            raise NotationParseError(text, token, f"{entry!r} is not a non-negative integer")
    try:
        return Cycle(int(entry) for entry in entries)
    except DuplicateElementError as e:
        raise NotationParseError(text, token, f"element {e.duplicate} repeats") from e
    except ValueError as e:
        raise NotationParseError(text, token, str(e)) from e

def parse_cycles(text : str) -> List[Cycle]:
    """
    The cycles written in text, in the order they are written. Cycles may overlap.
    """
    if not isinstance(text, str):
        raise TypeError(f"cycle notation must be a str, got {type(text).__name__}")

    cycles = []
    pos = 0
    for match in _CYCLE_TOKEN.finditer(text):
        _check_gap(text, pos, match.start())
        cycles.append(_parse_token(text, match))
        pos = match.end()
    _check_gap(text, pos, len(text))

    logger.debug("parsed %d cycles from %r", len(cycles), text)
    return cycles

def parse(text : str) -> Permutation:
    """
    Parses cycle notation into a Permutation.

    The cycles are added left to right, so the product is read the usual way with the rightmost cycle acting first:
    "(1 2)(2 3)" sends 2 -> 3 -> 3, 3 -> 2 -> 1 and 1 -> 1 -> 2. The empty string is the identity.
    """
    return Permutation.from_cycles(parse_cycles(text))

def format_permutation(p : Permutable) -> str:
    """
    Canonical notation: disjoint cycles, each starting at its smallest element, ordered by that element
    """
    if not isinstance(p, Permutation):
        p = Permutation(p)
    cycles = sorted(p.decompose())
    if len(cycles) == 0:
        return IDENTITY_NOTATION
    return "".join(str(cyc) for cyc in cycles)

########################################################################################################################
#   Unit Tests
########################################################################################################################

import random
import unittest

class TestNotation(unittest.TestCase):

    def test_parse_cycles(self):
        self.assertEqual(parse_cycles("(1 10 3)(7 1 3)"), [Cycle(1, 10, 3), Cycle(7, 1, 3)])
        self.assertEqual(parse_cycles("(5)"), [Cycle(5)])
        self.assertEqual(parse_cycles(""), [])
        self.assertEqual(parse_cycles(" (1 2) (3  4)\n"), [Cycle(1, 2), Cycle(3, 4)])
        self.assertEqual(parse_cycles("(010 2)"), [Cycle(10, 2)])

    def test_parse(self):
        p = parse("(1 10 3)(4 5 6)")
        self.assertEqual(p.decompose(), [Cycle(1, 10, 3), Cycle(4, 5, 6)])
        self.assertEqual(p.support, 11)
        self.assertTrue(parse("").is_identity())
        self.assertTrue(parse("   ").is_identity())
        self.assertTrue(parse("(3)").is_identity())
        self.assertTrue(parse("(1 2)(2 3)").equals(Cycle(1, 2, 3)))
        self.assertTrue(parse("(2 3)(1 2)").equals(Cycle(1, 3, 2)))

    def test_parse_errors(self):
        for bad in ("(1 2", "1 2)", "((1 2))", "(1 2))", ")(", "(1 a)", "(1 -2)", "(1 2.5)", "()", "( )",
                    "(1 2 1)", "x", "(1 2)x(3 4)", "(1,2)"):
            with self.assertRaises(NotationParseError, msg=bad):
                parse(bad)
        self.assertRaises(TypeError, parse, 12)

    def test_parse_error_token(self):
        with self.assertRaises(NotationParseError) as ctx:
            parse("(1 2)(3 x)(4 5)")
        self.assertEqual(ctx.exception.token, "(3 x)")
        self.assertEqual(ctx.exception.text, "(1 2)(3 x)(4 5)")

        with self.assertRaises(NotationParseError) as ctx:
            parse("(4 5)(1 2")
        self.assertEqual(ctx.exception.token, "(1 2")

        with self.assertRaises(NotationParseError) as ctx:
            parse("(1 2 3 2)")
        self.assertEqual(ctx.exception.token, "(1 2 3 2)")
        self.assertIsInstance(ctx.exception.__cause__, DuplicateElementError)

        with self.assertRaises(NotationParseError) as ctx:
            parse("(1 2)()")
        self.assertEqual(ctx.exception.token, "()")

        with self.assertRaises(NotationParseError) as ctx:
            parse("(4 5)(9223372036854775808 1)")
        self.assertEqual(ctx.exception.token, "(9223372036854775808 1)")
        self.assertIsInstance(ctx.exception.__cause__, ValueError)

    def test_format(self):
        self.assertEqual(format_permutation(parse("(10 3 1)(6 4 5)")), "(1 10 3)(4 5 6)")
        self.assertEqual(format_permutation(parse("(4 5 6)(1 10 3)")), "(1 10 3)(4 5 6)")
        self.assertEqual(format_permutation(Permutation.identity(7)), IDENTITY_NOTATION)
        self.assertEqual(format_permutation(Permutation()), "")
        self.assertEqual(format_permutation(Cycle(3, 1)), "(1 3)")
        self.assertEqual(format_permutation(Cycle(3)), "")
        self.assertEqual(str(parse("(1 3)(1 10)(4 6)(4 5)")), "(1 10 3)(4 5 6)")
        self.assertEqual(str(parse("(1 10 3)(4 5 6)(1 4 6 2)")), "(1 5 6 2 10 3)")

    def test_round_trip(self):
        for _ in range(200):
            n = random.randint(0, 40)
            images = list(range(n))
            random.shuffle(images)
            p = Permutation(images)
            text = format_permutation(p)
            self.assertTrue(parse(text).equals(p))
            self.assertEqual(format_permutation(parse(text)), text)

    def test_round_trip_overlapping(self):
        for _ in range(100):
            text = "".join(str(Cycle(random.sample(range(20), random.randint(1, 6))))
                           for _ in range(random.randint(0, 6)))
            p = parse(text)
            self.assertTrue(parse(format_permutation(p)).equals(p))
