"""mkrom — post-link ROM and cartridge image construction.

WHY: Freshly linked system images are raw blobs, but each boot path wants
a container of an exact size and layout: a zero-padded ROM, a PAK/3
cartridge with a relocation jump, or a Steem Engine cartridge with a
leading zero long.

HOW: Three stages — measure (size oracle), lay out (one rule per
container kind, composed from bounded streaming primitives), deliver
(the builder owns files and removes partial output on failure).

RULES:
- The image is opaque; nothing inside it is parsed or validated
- Adding a container kind = one TargetSpec record + one rule class
- Memory use is bounded by one scratch buffer, not by image size
"""

__version__ = "0.1.0"
