#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Random names for shipments and containers created with init --yes
"""

from __future__ import annotations

import random

LEFT = [
    "admiring",
    "amazing",
    "angry",
    "blissful",
    "bold",
    "brave",
    "clever",
    "cranky",
    "dreamy",
    "eager",
    "elastic",
    "epic",
    "festive",
    "focused",
    "gallant",
    "happy",
    "hungry",
    "jolly",
    "keen",
    "lucid",
    "modest",
    "nifty",
    "optimistic",
    "peaceful",
    "quirky",
    "relaxed",
    "serene",
    "sharp",
    "stoic",
    "tender",
    "upbeat",
    "vibrant",
    "wizardly",
    "zealous",
]

RIGHT = [
    "albattani",
    "babbage",
    "bohr",
    "curie",
    "darwin",
    "einstein",
    "euler",
    "feynman",
    "galileo",
    "goldberg",
    "hawking",
    "hopper",
    "kepler",
    "lamarr",
    "lovelace",
    "meitner",
    "newton",
    "noether",
    "pasteur",
    "ritchie",
    "shannon",
    "tesla",
    "torvalds",
    "turing",
    "wozniak",
]


def get_random_name(retry: int = 0, rand: random.Random = None) -> str:
    """
    Generates a name such as "focused-turing". When retry is set, a digit is appended.

    :param int retry:
    :param random.Random rand: the random generator to use
    :rtype: str
    """
    rand = rand or random.Random()
    name = f"{rand.choice(LEFT)}-{rand.choice(RIGHT)}"
    if retry > 0:
        name = f"{name}{rand.randint(0, 9)}"
    return name
