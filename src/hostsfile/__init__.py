from hostsfile import parser
from hostsfile import serializer
from hostsfile import validator
from hostsfile.parser import parse
from hostsfile.serializer import serialize

__all__ = [
    "parser",
    "serializer",
    "validator",
    "parse",
    "serialize",
]
